import os
import sys
import re
import logging
from pathlib import Path

from msoffcrypto.exceptions import DecryptionError, InvalidKeyError


SUPPORTED_EXTENSIONS = ('.csv', '.txt', '.xls', '.xlsx')
OUTPUT_EXTENSION = '.xlsx'

# Phrases the engines use when a password is rejected or missing.
# Excel COM: "The password you supplied is not correct."
# openpyxl engine: "... is protected with an open password", "... does not unprotect sheet ..."
PASSWORD_ERROR_PATTERNS = [
    r'password you supplied is not correct',
    r'protected with an open password',
    r'password supplied does not unprotect',
]


class Utils:
    """Utility functions shared across the application"""

    @staticmethod
    def get_base_directory():
        """Get the base directory for the application (exe or script location)"""
        if getattr(sys, 'frozen', False):
            # Running as a PyInstaller bundle
            return Path(sys.executable).parent
        else:
            # Running as a script - use the main script's directory
            return Path(sys.argv[0]).resolve().parent

    @staticmethod
    def clean_path(path):
        """Strip whitespace and surrounding quotes from a pasted path"""
        if path is None:
            return ""
        p = str(path).strip().strip('"').strip("'")
        return str(Path(p).expanduser()) if p else ""

    @staticmethod
    def is_supported_file(path):
        return Path(str(path)).suffix.lower() in SUPPORTED_EXTENSIONS

    @staticmethod
    def build_output_path(source_path, output_folder):
        """
        Build the XLSX output path for a source file

        Args:
            source_path (str): File being converted or unlocked
            output_folder (str): Destination folder

        Returns:
            Path: <output_folder>/<source stem>.xlsx
        """
        return Path(output_folder) / (Path(source_path).stem + OUTPUT_EXTENSION)

    @staticmethod
    def is_password_error(error):
        """Check whether an engine error describes a rejected password"""
        if isinstance(error, (InvalidKeyError, DecryptionError)):
            return True
        # I/O failures carry the file path, which may contain any word
        if isinstance(error, OSError):
            return False
        text = str(error or '').lower()
        return any(re.search(pattern, text) for pattern in PASSWORD_ERROR_PATTERNS)

    @staticmethod
    def same_file(first, second):
        try:
            return os.path.normcase(str(Path(first).resolve())) == os.path.normcase(str(Path(second).resolve()))
        except OSError as e:
            logging.debug(f"Could not compare paths '{first}' and '{second}': {e}")
            return False

    @staticmethod
    def format_elapsed(seconds):
        if seconds < 60:
            return f"{seconds:.2f}s"
        minutes, secs = divmod(int(seconds), 60)
        return f"{minutes}m {secs}s"
