import os
import time
import logging
from pathlib import Path

from .errors import ProtectionRejectedError, RunAlreadyActiveError, SpreadsheetUnavailableError
from .log_service import log_success
from .spreadsheet_session import SpreadsheetSession
from .utils import Utils, SUPPORTED_EXTENSIONS
from ..models.data_models import (
    ErrorCategory, Operation, ProcessingResult, RunState, RunSummary, SaveMode,
)

AUTHENTICATION_GUIDANCE = "Re-enter the password and try again."
FILE_GUIDANCE = "Check that the file is not open elsewhere, is not corrupted, and that the disk and folder permissions allow writing."

# Only one batch may run in the process, whichever BatchProcessor started it
_active_run = None


def summarize(results, cancelled=False):
    """Build the end-of-run summary for a list of ProcessingResults"""
    failed = [r.source_path for r in results if not r.success]
    return RunSummary(
        total=len(results),
        succeeded=len(results) - len(failed),
        failed=len(failed),
        cancelled=cancelled,
        failed_sources=failed,
    )


class BatchProcessor:
    """
    Runs convert and unlock batches through a single spreadsheet session

    At most one run is active per process: starting a run while any
    processor has one in progress raises RunAlreadyActiveError.
    """

    def __init__(self, settings, engine_factory=None, progress_callback=None, yield_callback=None):
        """
        Args:
            settings (Settings): Current application settings
            engine_factory (callable): Returns a started engine; defaults to the engine named in settings
            progress_callback (callable): Called as progress_callback(completed, total, message)
            yield_callback (callable): Called between files so the GUI can process events
        """
        self.settings = settings
        self.engine_factory = engine_factory
        self.progress_callback = progress_callback
        self.yield_callback = yield_callback
        self.run_state = None
        self.last_run_cancelled = False

    @property
    def is_running(self):
        return self.run_state is not None and self.run_state.is_active

    def request_cancel(self):
        """Ask the active run to stop before the next file"""
        if not self.is_running:
            return False
        self.run_state.cancel_requested = True
        logging.info("Cancellation requested - the current file will finish first")
        return True

    def run_conversion(self, paths, output_folder):
        """Convert each file to XLSX in output_folder"""
        return self._run(Operation.CONVERT, paths, output_folder)

    def run_unlock(self, paths, output_folder, password):
        """Remove protection from each file and save an unprotected XLSX copy in output_folder"""
        return self._run(Operation.UNLOCK, paths, output_folder, password)

    def _run(self, operation, paths, output_folder, password=None):
        global _active_run

        if _active_run is not None:
            message = f"A {_active_run.operation} run is already in progress - wait for it to finish or cancel it"
            logging.warning(message)
            raise RunAlreadyActiveError(message)

        session = SpreadsheetSession(self.settings.engine, self.engine_factory)
        paths = [str(p) for p in paths]
        self.run_state = RunState(operation=operation.value, total=len(paths))
        _active_run = self.run_state
        self.last_run_cancelled = False
        results = []
        started = time.perf_counter()
        logging.info(f"Starting {operation.value} of {len(paths)} file(s) into {output_folder}")

        try:
            session.initialize()
            if session.unavailable:
                raise SpreadsheetUnavailableError(session.unavailable_reason)

            for index, path in enumerate(paths):
                if self.run_state.cancel_requested:
                    self.last_run_cancelled = True
                    logging.info(f"Run cancelled after {index} of {len(paths)} file(s)")
                    break

                self._report_progress(f"Processing {Path(path).name} ({index + 1}/{len(paths)})...")
                if operation == Operation.CONVERT:
                    result = self._convert_file(session, path, output_folder)
                else:
                    result = self._unlock_file(session, path, output_folder, password)
                results.append(result)

                self.run_state.completed += 1
                self._report_progress(f"Finished {Path(path).name} ({self.run_state.completed}/{len(paths)})")
                self._yield()
        finally:
            session.dispose()
            self.run_state.is_active = False
            self.run_state = None
            _active_run = None

        summary = summarize(results, self.last_run_cancelled)
        logging.info(f"{operation.value.capitalize()} finished in {Utils.format_elapsed(time.perf_counter() - started)}: {summary.describe()}")
        return results

    def _convert_file(self, session, path, output_folder):
        start = time.perf_counter()
        output_path = Utils.build_output_path(path, output_folder)
        try:
            self._check_supported(path)
            session.open_document(path)
            session.save_as(output_path, SaveMode.PLAIN_CONVERSION)
            session.close_document()
        except SpreadsheetUnavailableError:
            raise
        except Exception as e:
            session.close_document()
            message = f"Could not convert {Path(path).name}: {e}. {FILE_GUIDANCE}"
            logging.error(message)
            return ProcessingResult.failed(path, message, time.perf_counter() - start)

        self._delete_original(path, output_path)
        log_success(f"Converted {Path(path).name} -> {output_path}")
        return ProcessingResult.succeeded(path, output_path, time.perf_counter() - start)

    def _unlock_file(self, session, path, output_folder, password):
        start = time.perf_counter()
        output_path = Utils.build_output_path(path, output_folder)
        try:
            self._check_supported(path)
            session.open_document(path, password=password)
            still_protected = session.remove_protection(password)
            if still_protected and not session.removed_protection:
                raise ProtectionRejectedError(Path(path).name, still_protected)
            session.save_as(output_path, SaveMode.UNPROTECTED)
            session.close_document()
        except SpreadsheetUnavailableError:
            raise
        except Exception as e:
            session.close_document()
            if isinstance(e, ProtectionRejectedError) or Utils.is_password_error(e):
                message = f"Incorrect or unsupported password for {Path(path).name}: {e}. {AUTHENTICATION_GUIDANCE}"
                category = ErrorCategory.AUTHENTICATION
            else:
                message = f"Could not unlock {Path(path).name}: {e}. {FILE_GUIDANCE}"
                category = ErrorCategory.FILE
            logging.error(message)
            return ProcessingResult.failed(path, message, time.perf_counter() - start, category)

        if still_protected:
            logging.warning(f"{Path(path).name} saved with protection still on: {', '.join(still_protected)}")
        self._delete_original(path, output_path)
        log_success(f"Unlocked {Path(path).name} -> {output_path}")
        return ProcessingResult.succeeded(path, output_path, time.perf_counter() - start)

    @staticmethod
    def _check_supported(path):
        if not Utils.is_supported_file(path):
            raise ValueError(f"unsupported file type '{Path(path).suffix}', expected one of {', '.join(SUPPORTED_EXTENSIONS)}")

    def _delete_original(self, source_path, output_path):
        """Delete the source after a successful save when auto-delete is enabled"""
        if not self.settings.auto_delete_originals:
            return
        if Utils.same_file(source_path, output_path):
            logging.info(f"Keeping {source_path}: it was overwritten by its own output")
            return
        try:
            os.remove(source_path)
            logging.info(f"Deleted original {source_path}")
        except OSError as e:
            logging.warning(f"Could not delete original {source_path}: {e}")

    def _report_progress(self, message):
        if self.progress_callback and self.run_state:
            self.progress_callback(self.run_state.completed, self.run_state.total, message)

    def _yield(self):
        if self.yield_callback:
            self.yield_callback()
