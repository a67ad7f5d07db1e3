import logging
from pathlib import Path

try:
    import pythoncom
    import win32com.client as win32
    COM_AVAILABLE = True
except ImportError:
    COM_AVAILABLE = False
    logging.debug("pywin32 not available - Excel COM engine disabled, openpyxl engine will be used")

# XlFileFormat.xlOpenXMLWorkbook
XL_OPEN_XML_WORKBOOK = 51
# XlSaveConflictResolution.xlLocalSessionChanges
XL_LOCAL_SESSION_CHANGES = 2


class ComSheet:
    """A worksheet inside a workbook opened through Excel COM"""

    def __init__(self, worksheet):
        self._worksheet = worksheet
        self.name = worksheet.Name

    def is_protected(self):
        ws = self._worksheet
        return bool(ws.ProtectContents or ws.ProtectDrawingObjects or ws.ProtectScenarios)

    def unprotect(self, password=None):
        if password is None:
            self._worksheet.Unprotect()
        else:
            self._worksheet.Unprotect(password)


class ComWorkbook:
    """Workbook handle returned by ExcelComEngine.open_workbook"""

    def __init__(self, workbook, path):
        self._workbook = workbook
        self.path = Path(path)
        self.name = self.path.name

    def has_structure_protection(self):
        return bool(self._workbook.ProtectStructure)

    def has_window_protection(self):
        return bool(self._workbook.ProtectWindows)

    def unprotect_structure(self, password=None):
        self._unprotect(password)

    def unprotect_windows(self, password=None):
        # Excel clears structure and window protection with the same call
        self._unprotect(password)

    def _unprotect(self, password):
        if password is None:
            self._workbook.Unprotect()
        else:
            self._workbook.Unprotect(password)

    def sheets(self):
        return [ComSheet(ws) for ws in self._workbook.Worksheets]

    def save_as(self, output_path, strip_protection=False):
        target = str(Path(output_path).absolute())
        if strip_protection:
            self._workbook.SaveAs(
                Filename=target,
                FileFormat=XL_OPEN_XML_WORKBOOK,
                Password="",
                WriteResPassword="",
                ReadOnlyRecommended=False,
                ConflictResolution=XL_LOCAL_SESSION_CHANGES,
            )
        else:
            self._workbook.SaveAs(
                Filename=target,
                FileFormat=XL_OPEN_XML_WORKBOOK,
                ConflictResolution=XL_LOCAL_SESSION_CHANGES,
            )

    def close(self):
        if self._workbook is None:
            return
        try:
            self._workbook.Close(SaveChanges=False)
        finally:
            self._workbook = None


class ExcelComEngine:
    """Drives a private Excel instance through COM automation"""

    name = "Excel COM"

    def __init__(self):
        self._excel_app = None
        self._com_initialized = False

    def start(self):
        """Start a hidden, non-interactive Excel instance"""
        if not COM_AVAILABLE:
            raise RuntimeError("pywin32 is not installed - Excel automation is not available")

        pythoncom.CoInitialize()
        self._com_initialized = True

        try:
            # DispatchEx always creates a new instance so quitting it never touches the user's Excel
            self._excel_app = win32.DispatchEx("Excel.Application")
            logging.info("Created new Excel instance")
        except Exception as e:
            self.quit()
            raise RuntimeError(f"Microsoft Excel could not be started (is it installed and licensed?): {e}")

        # Test if we can access the Workbooks collection
        try:
            self._excel_app.Workbooks.Count
        except Exception as e:
            logging.error("Excel COM automation is not working properly. This may be due to:")
            logging.error("1. Excel running in restricted mode")
            logging.error("2. Permission issues with COM automation")
            logging.error("3. Excel running as a different user")
            self.quit()
            raise RuntimeError(f"Excel Workbooks collection not accessible: {e}")

        # Configure the Excel instance to be hidden and non-interactive
        for attribute, value in (("Visible", False), ("DisplayAlerts", False),
                                 ("EnableEvents", False), ("ScreenUpdating", False)):
            try:
                setattr(self._excel_app, attribute, value)
            except Exception as e:
                logging.warning(f"Could not set Excel.{attribute}: {e}")

    def open_workbook(self, path, password=None):
        if self._excel_app is None:
            raise RuntimeError("Excel instance is not running")

        source = str(Path(path).absolute())
        if password is None:
            workbook = self._excel_app.Workbooks.Open(source, UpdateLinks=0, ReadOnly=False)
        else:
            workbook = self._excel_app.Workbooks.Open(source, UpdateLinks=0, ReadOnly=False, Password=password)
        return ComWorkbook(workbook, path)

    def quit(self):
        """Quit Excel and release COM, each step independently"""
        if self._excel_app is not None:
            try:
                self._excel_app.Quit()
                logging.info("Excel instance closed")
            except Exception as e:
                logging.warning(f"Error quitting Excel: {e}")
            finally:
                self._excel_app = None

        if self._com_initialized:
            try:
                pythoncom.CoUninitialize()
            except Exception as e:
                logging.warning(f"Error releasing COM: {e}")
            finally:
                self._com_initialized = False
