import logging
from enum import Enum
from pathlib import Path

from .errors import SpreadsheetUnavailableError
from .excel_com import ExcelComEngine, COM_AVAILABLE
from .excel_openpyxl import OpenpyxlEngine
from ..models.data_models import SaveMode


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    OPENING = "opening"
    OPEN = "open"
    SAVING = "saving"
    CLOSED = "closed"
    DISPOSED = "disposed"


def start_engine(preference="auto"):
    """
    Start a spreadsheet engine

    "auto" tries Excel COM first and falls back to openpyxl, "excel" and
    "openpyxl" force one engine. Raises if the requested engine can't start.
    """
    if preference in ("auto", "excel"):
        if COM_AVAILABLE:
            engine = ExcelComEngine()
            try:
                engine.start()
                return engine
            except Exception as e:
                if preference == "excel":
                    raise
                logging.warning(f"Excel COM engine failed to start: {e}, trying openpyxl fallback")
        elif preference == "excel":
            raise RuntimeError("Excel automation requires pywin32 on Windows with Microsoft Excel installed")

    engine = OpenpyxlEngine()
    engine.start()
    return engine


class SpreadsheetSession:
    """
    Owns one spreadsheet engine and at most one open document

    Use as a context manager so the engine is always released:

        with SpreadsheetSession("auto") as session:
            session.open_document(path)
            session.save_as(output, SaveMode.PLAIN_CONVERSION)
            session.close_document()
    """

    def __init__(self, engine_preference="auto", engine_factory=None):
        self.engine_preference = engine_preference
        self._engine_factory = engine_factory or (lambda: start_engine(engine_preference))
        self._engine = None
        self._document = None
        # (description, release callable), released in reverse order by dispose()
        self._handles = []
        self.state = SessionState.UNINITIALIZED
        self.unavailable = False
        self.unavailable_reason = ""
        # parts unprotected by the last remove_protection call
        self.removed_protection = []

    @property
    def engine_name(self):
        return getattr(self._engine, "name", "") if self._engine else ""

    @property
    def has_open_document(self):
        return self._document is not None

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.dispose()
        return False

    def initialize(self):
        """Start the spreadsheet application, flagging the session unavailable on failure"""
        if self.state != SessionState.UNINITIALIZED:
            return not self.unavailable

        try:
            self._engine = self._engine_factory()
        except Exception as e:
            self.unavailable = True
            self.unavailable_reason = (
                f"The spreadsheet application is not available ({e}). "
                f"Check that it is installed, licensed and not out of resources."
            )
            logging.error(self.unavailable_reason)
            return False

        self._handles.append(("spreadsheet application", self._engine.quit))
        self.state = SessionState.READY
        logging.info(f"Spreadsheet session ready ({self.engine_name})")
        return True

    def _require_ready(self):
        if self.unavailable:
            raise SpreadsheetUnavailableError(self.unavailable_reason)
        if self.state == SessionState.DISPOSED:
            raise SpreadsheetUnavailableError("The spreadsheet session has already been disposed")
        if self.state == SessionState.UNINITIALIZED:
            raise SpreadsheetUnavailableError("The spreadsheet session has not been initialized")

    def _require_document(self):
        self._require_ready()
        if self._document is None:
            raise RuntimeError("No document is open")

    def open_document(self, path, password=None):
        """Open a document, passing the password to the engine only when one is given"""
        self._require_ready()

        if self._document is not None:
            logging.warning(f"Document '{self._document.name}' was still open when opening '{Path(path).name}' - closing it first")
            self.close_document()

        self.state = SessionState.OPENING
        try:
            if password is None:
                document = self._engine.open_workbook(path)
            else:
                document = self._engine.open_workbook(path, password=password)
        except Exception:
            self.state = SessionState.CLOSED
            raise

        self._document = document
        self._handles.append((f"document {document.name}", document.close))
        self.state = SessionState.OPEN
        logging.debug(f"Opened {path}")
        return document

    def remove_protection(self, password=None):
        """
        Remove structure, window and sheet protection from the open document

        Each part is unprotected on its own; a rejected unprotect is logged and
        the rest still proceed.
        The parts that were unprotected are kept in removed_protection.

        Returns:
            list: Names of the parts that are still protected
        """
        self._require_document()
        document = self._document
        still_protected = []
        self.removed_protection = []

        steps = []
        if document.has_structure_protection():
            steps.append(("workbook structure", document.unprotect_structure))
        if document.has_window_protection():
            steps.append(("workbook windows", document.unprotect_windows))
        for sheet in document.sheets():
            if sheet.is_protected():
                steps.append((f"sheet '{sheet.name}'", sheet.unprotect))

        for label, unprotect in steps:
            try:
                unprotect(password)
                self.removed_protection.append(label)
                logging.info(f"Removed protection from {label} in {document.name}")
            except Exception as e:
                still_protected.append(label)
                logging.warning(f"Could not unprotect {label} in {document.name}: {e}")

        if not steps:
            logging.debug(f"{document.name} has no structure, window or sheet protection")
        return still_protected

    def save_as(self, output_path, mode=SaveMode.PLAIN_CONVERSION):
        """Save the open document as XLSX, overwriting any existing file"""
        self._require_document()
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        self.state = SessionState.SAVING
        try:
            self._document.save_as(output_path, strip_protection=(mode == SaveMode.UNPROTECTED))
        finally:
            self.state = SessionState.OPEN
        logging.debug(f"Saved {output_path} ({mode.value})")
        return output_path

    def close_document(self):
        """Close the open document without saving; does nothing if none is open"""
        if self._document is None:
            return

        document = self._document
        self._document = None
        self._handles = [h for h in self._handles if h[1] != document.close]
        try:
            document.close()
        except Exception as e:
            logging.warning(f"Error closing document {document.name}: {e}")
        finally:
            if self.state != SessionState.DISPOSED:
                self.state = SessionState.CLOSED

    def dispose(self):
        """Release every handle in reverse acquisition order; safe to call more than once"""
        if self.state == SessionState.DISPOSED:
            return

        self._document = None
        while self._handles:
            label, release = self._handles.pop()
            try:
                release()
                logging.debug(f"Released {label}")
            except Exception as e:
                logging.warning(f"Failed to release {label}: {e}")

        self._engine = None
        self.state = SessionState.DISPOSED
        logging.info("Spreadsheet session disposed")
