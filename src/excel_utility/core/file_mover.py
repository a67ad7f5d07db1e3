import time
import shutil
import logging
from datetime import datetime
from pathlib import Path

from .errors import FileCountMismatchError
from .log_service import log_success
from ..models.data_models import ProcessingResult


class FileMover:
    """Moves files matching a name pattern into a dated folder under a destination"""

    def __init__(self, source_dir, destination_dir, pattern="*", date_folder_format="%Y-%m", expected_count=0):
        self.source_dir = Path(source_dir)
        self.destination_dir = Path(destination_dir)
        self.pattern = pattern or "*"
        self.date_folder_format = date_folder_format or ""
        self.expected_count = expected_count or 0

    @classmethod
    def from_settings(cls, settings):
        return cls(
            settings.move_source_path,
            settings.move_destination_path,
            settings.move_pattern,
            settings.move_date_folder_format,
            settings.move_expected_count,
        )

    def find_files(self):
        """Files in the source folder matching the pattern, sorted by name"""
        if not self.source_dir.is_dir():
            raise FileNotFoundError(f"Source folder not found: {self.source_dir}")
        return sorted((p for p in self.source_dir.glob(self.pattern) if p.is_file()), key=lambda p: p.name.lower())

    def target_folder(self, when=None):
        if not self.date_folder_format:
            return self.destination_dir
        when = when or datetime.now()
        return self.destination_dir / when.strftime(self.date_folder_format)

    def move_files(self, when=None):
        """
        Move every matching file into the target folder

        Args:
            when (datetime, optional): Date used for the dated subfolder, defaults to now

        Returns:
            list: One ProcessingResult per file, in name order

        Raises:
            FileCountMismatchError: expected_count is set and doesn't match; nothing is moved
        """
        files = self.find_files()

        if self.expected_count and len(files) != self.expected_count:
            logging.error(f"File count check failed in {self.source_dir}: expected {self.expected_count}, found {len(files)}")
            raise FileCountMismatchError(self.expected_count, len(files))

        if not files:
            logging.info(f"No files matching '{self.pattern}' in {self.source_dir}")
            return []

        target = self.target_folder(when)
        target.mkdir(parents=True, exist_ok=True)
        logging.info(f"Moving {len(files)} file(s) from {self.source_dir} to {target}")

        results = []
        for source in files:
            start = time.perf_counter()
            destination = target / source.name
            try:
                if destination.exists():
                    logging.info(f"Replacing existing {destination}")
                    destination.unlink()
                shutil.move(str(source), str(destination))
            except Exception as e:
                message = f"Could not move {source.name}: {e}"
                logging.error(message)
                results.append(ProcessingResult.failed(source, message, time.perf_counter() - start))
                continue

            log_success(f"Moved {source.name} -> {destination}")
            results.append(ProcessingResult.succeeded(source, destination, time.perf_counter() - start))

        return results
