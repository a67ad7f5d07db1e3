import sys
import logging
from datetime import datetime
from pathlib import Path

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "SUCCESS": SUCCESS,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class LogFormatter(logging.Formatter):
    """Formats records as [yyyy-MM-dd HH:mm:ss.fff] [LEVEL] message"""

    def __init__(self):
        super().__init__("[%(asctime)s] [%(levelname)s] %(message)s")

    def formatTime(self, record, datefmt=None):
        created = datetime.fromtimestamp(record.created)
        return created.strftime("%Y-%m-%d %H:%M:%S.") + f"{int(record.msecs):03d}"


class DailyFileHandler(logging.Handler):
    """Appends records to logs/<yyyy-MM-dd>.log, falling back to the console if the file can't be written"""

    def __init__(self, base_dir, fallback_stream=None):
        super().__init__()
        self.logs_dir = Path(base_dir) / "logs"
        self.fallback_stream = fallback_stream or sys.stderr
        self.file_failed = False

    def log_file_for(self, created):
        return self.logs_dir / f"{datetime.fromtimestamp(created).strftime('%Y-%m-%d')}.log"

    def emit(self, record):
        try:
            msg = self.format(record)
        except Exception:
            self.handleError(record)
            return

        if not self.file_failed:
            try:
                self.logs_dir.mkdir(parents=True, exist_ok=True)
                with open(self.log_file_for(record.created), 'a', encoding='utf-8') as f:
                    f.write(msg + '\n')
                return
            except OSError as e:
                self.file_failed = True
                self._write_console(f"Log file unavailable ({e}), logging to console only")

        self._write_console(msg)

    def _write_console(self, text):
        try:
            self.fallback_stream.write(text + '\n')
            self.fallback_stream.flush()
        except Exception:
            pass


_file_handler = None
_console_handler = None


def setup_logging(base_dir, mirror_to_console=True, detailed=False):
    """Configure the root logger with the daily file handler and optional console mirror"""
    global _file_handler

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if detailed else logging.INFO)

    if _file_handler is not None:
        root.removeHandler(_file_handler)
    _file_handler = DailyFileHandler(base_dir)
    _file_handler.setFormatter(LogFormatter())
    root.addHandler(_file_handler)

    set_console_mirroring(mirror_to_console)
    return _file_handler


def apply_log_settings(detailed):
    """Switch DEBUG level and console mirroring on or off once settings are known"""
    logging.getLogger().setLevel(logging.DEBUG if detailed else logging.INFO)
    set_console_mirroring(detailed)


def set_console_mirroring(enabled):
    global _console_handler

    root = logging.getLogger()
    if enabled and _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(LogFormatter())
        root.addHandler(_console_handler)
    elif not enabled and _console_handler is not None:
        root.removeHandler(_console_handler)
        _console_handler = None


def log_message(message, level="INFO"):
    """Log a message at a level given by name (INFO, WARNING, ERROR, DEBUG, SUCCESS)"""
    levelno = LEVELS.get(str(level).upper(), logging.INFO)
    logging.log(levelno, message)


def log_success(message):
    logging.log(SUCCESS, message)
