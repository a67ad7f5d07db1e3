# Data models shared by the settings store, the batch processor and the GUI.

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List


class ErrorCategory(str, Enum):
    NONE = "none"
    FILE = "file"
    AUTHENTICATION = "authentication"


class SaveMode(str, Enum):
    """How a document is written back to disk"""
    PLAIN_CONVERSION = "plain_conversion"
    UNPROTECTED = "unprotected"


class Operation(str, Enum):
    CONVERT = "convert"
    UNLOCK = "unlock"


ENGINE_CHOICES = ("auto", "excel", "openpyxl")


@dataclass
class Settings:
    """Application settings persisted beside the executable"""
    default_input_path: str = ""
    default_output_path: str = ""
    remember_paths: bool = True
    auto_delete_originals: bool = False
    show_detailed_logs: bool = False
    sound_notifications: bool = True
    batch_size: int = 50
    retry_attempts: int = 1
    engine: str = "auto"
    move_source_path: str = ""
    move_destination_path: str = ""
    move_pattern: str = "*.xlsx"
    move_date_folder_format: str = "%Y-%m"
    move_expected_count: int = 0

    @classmethod
    def keys(cls):
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of processing a single file"""
    source_path: str
    success: bool
    output_path: str = ""
    error_message: str = ""
    elapsed_seconds: float = 0.0
    error_category: ErrorCategory = ErrorCategory.NONE

    @classmethod
    def succeeded(cls, source_path, output_path, elapsed_seconds):
        return cls(str(source_path), True, str(output_path), "", elapsed_seconds, ErrorCategory.NONE)

    @classmethod
    def failed(cls, source_path, error_message, elapsed_seconds, category=ErrorCategory.FILE):
        return cls(str(source_path), False, "", error_message, elapsed_seconds, category)


@dataclass
class RunState:
    """Progress of the batch that is currently running"""
    operation: str
    total: int
    completed: int = 0
    is_active: bool = True
    cancel_requested: bool = False


@dataclass
class RunSummary:
    total: int
    succeeded: int
    failed: int
    cancelled: bool = False
    failed_sources: List[str] = field(default_factory=list)

    def describe(self):
        text = f"{self.succeeded} of {self.total} file(s) succeeded, {self.failed} failed"
        if self.cancelled:
            text += " (run cancelled)"
        return text
