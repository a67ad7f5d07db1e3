class SpreadsheetUnavailableError(RuntimeError):
    """The spreadsheet application could not be started or has been disposed"""


class RunAlreadyActiveError(RuntimeError):
    """A batch was started while another one is still running"""


class FileCountMismatchError(ValueError):
    """The number of files found does not match the expected count"""

    def __init__(self, expected, found):
        self.expected = expected
        self.found = found
        super().__init__(f"Expected {expected} file(s) but found {found}. No files were moved.")


class ProtectionRejectedError(ValueError):
    """The password was rejected by every protected part of a document"""

    def __init__(self, name, parts):
        self.parts = list(parts)
        super().__init__(f"The password you supplied is not correct for {', '.join(self.parts)} in {name}")
