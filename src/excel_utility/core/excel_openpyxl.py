import io
import re
import base64
import hashlib
import logging
from pathlib import Path

import msoffcrypto
from msoffcrypto.exceptions import DecryptionError, FileFormatError, InvalidKeyError
import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.utils.protection import hash_password
from openpyxl.worksheet.protection import SheetProtection

DELIMITERS = {'.csv': ',', '.txt': '\t'}
NUMBER_PATTERN = re.compile(r'^-?\d+(\.\d+)?([eE][-+]?\d+)?$')
INVALID_TITLE_CHARS = re.compile(r'[\[\]:*?/\\]')


def password_matches(password, legacy_hash=None, algorithm=None, hash_value=None, salt=None, spin_count=None):
    """
    Check a password against the hash stored in a protection element

    Args:
        password (str): Password supplied by the user, may be None
        legacy_hash (str): 16-bit hex hash written by older Excel versions
        algorithm (str): Hash algorithm name, e.g. "SHA-512"
        hash_value (str): Base64 hash written by current Excel versions
        salt (str): Base64 salt used with hash_value
        spin_count (int): Number of hash iterations

    Returns:
        bool: True if the password matches or no password is stored
    """
    if algorithm and hash_value:
        try:
            digest_name = algorithm.lower().replace('-', '')
            digest = hashlib.new(digest_name, base64.b64decode(salt or '') + (password or '').encode('utf-16-le')).digest()
            for i in range(int(spin_count or 0)):
                digest = hashlib.new(digest_name, digest + i.to_bytes(4, 'little')).digest()
            return base64.b64encode(digest).decode('ascii') == str(hash_value)
        except ValueError as e:
            logging.warning(f"Unsupported protection hash '{algorithm}': {e}")
            return False

    if legacy_hash:
        return hash_password(password or '').upper() == str(legacy_hash).upper()

    return True


class OpenpyxlSheet:
    def __init__(self, worksheet):
        self._worksheet = worksheet
        self.name = worksheet.title

    def is_protected(self):
        return bool(self._worksheet.protection.sheet)

    def unprotect(self, password=None):
        protection = self._worksheet.protection
        if not password_matches(password, protection.password, protection.algorithmName,
                                protection.hashValue, protection.saltValue, protection.spinCount):
            raise ValueError(f"The password supplied does not unprotect sheet '{self.name}'")
        self._worksheet.protection = SheetProtection()


class OpenpyxlWorkbook:
    """Workbook handle returned by OpenpyxlEngine.open_workbook"""

    def __init__(self, workbook, path):
        self._workbook = workbook
        self.path = Path(path)
        self.name = self.path.name

    def has_structure_protection(self):
        security = self._workbook.security
        return bool(security is not None and security.lockStructure)

    def has_window_protection(self):
        security = self._workbook.security
        return bool(security is not None and security.lockWindows)

    def unprotect_structure(self, password=None):
        self._check_workbook_password(password)
        self._workbook.security.lockStructure = False

    def unprotect_windows(self, password=None):
        self._check_workbook_password(password)
        self._workbook.security.lockWindows = False

    def _check_workbook_password(self, password):
        security = self._workbook.security
        if security is None:
            return
        if not password_matches(password,
                                getattr(security, 'workbookPassword', None),
                                getattr(security, 'workbookAlgorithmName', None),
                                getattr(security, 'workbookHashValue', None),
                                getattr(security, 'workbookSaltValue', None),
                                getattr(security, 'workbookSpinCount', None)):
            raise ValueError(f"The password supplied does not unprotect workbook '{self.name}'")

    def sheets(self):
        return [OpenpyxlSheet(ws) for ws in self._workbook.worksheets]

    def save_as(self, output_path, strip_protection=False):
        # openpyxl never writes an encrypted file, so the output has no open password either way
        if strip_protection and self._workbook.security is not None:
            self._workbook.security.lockRevision = False
            security = self._workbook.security
            if not (security.lockStructure or security.lockWindows):
                self._workbook.security = None
        self._workbook.save(str(output_path))

    def close(self):
        if self._workbook is None:
            return
        try:
            self._workbook.close()
        finally:
            self._workbook = None


class OpenpyxlEngine:
    """Pure Python engine: openpyxl for XLSX, pandas for CSV/TXT/XLS, msoffcrypto for encrypted files"""

    name = "openpyxl"

    def __init__(self):
        self._started = False

    def start(self):
        self._started = True
        logging.info("Using openpyxl spreadsheet engine")

    def quit(self):
        self._started = False

    def open_workbook(self, path, password=None):
        if not self._started:
            raise RuntimeError("openpyxl engine has not been started")

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        ext = path.suffix.lower()
        if ext in DELIMITERS:
            workbook = self._load_delimited(path, DELIMITERS[ext])
        elif ext == '.xls':
            workbook = self._load_legacy(self._read_source(path, password))
        elif ext in ('.xlsx', '.xlsm'):
            workbook = load_workbook(self._read_source(path, password))
        else:
            raise ValueError(f"Unsupported file type: {path.suffix}")

        return OpenpyxlWorkbook(workbook, path)

    def _read_source(self, path, password):
        """Return the path itself, or a decrypted in-memory copy for encrypted files"""
        with open(path, 'rb') as f:
            try:
                office_file = msoffcrypto.OfficeFile(f)
                encrypted = office_file.is_encrypted()
            except FileFormatError as e:
                logging.debug(f"{path.name} is not an Office container ({e}), reading directly")
                return str(path)

            if not encrypted:
                return str(path)

            if password is None:
                raise ValueError(f"{path.name} is protected with an open password - a password is required")

            decrypted = io.BytesIO()
            try:
                office_file.load_key(password=password)
                office_file.decrypt(decrypted)
            except (InvalidKeyError, DecryptionError) as e:
                raise ValueError(f"The password you supplied is not correct for {path.name}: {e}")

        decrypted.seek(0)
        logging.debug(f"Decrypted {path.name} in memory")
        return decrypted

    def _load_delimited(self, path, delimiter):
        workbook = Workbook()
        ws = workbook.active
        ws.title = self._sheet_title(path.stem)

        df = None
        for encoding in ('utf-8-sig', 'cp1252'):
            try:
                df = pd.read_csv(path, sep=delimiter, header=None, dtype=object, keep_default_na=False,
                                 skip_blank_lines=False, encoding=encoding)
                break
            except UnicodeDecodeError:
                logging.debug(f"{path.name} is not {encoding}, trying next encoding")
            except pd.errors.EmptyDataError:
                logging.info(f"{path.name} is empty, writing an empty workbook")
                return workbook

        if df is None:
            raise ValueError(f"Could not decode {path.name}")

        for row in df.itertuples(index=False):
            ws.append([self._coerce_cell(value) for value in row])
        return workbook

    def _load_legacy(self, source):
        frames = pd.read_excel(source, sheet_name=None, header=None, engine='xlrd')
        workbook = Workbook()
        workbook.remove(workbook.active)

        for name, df in frames.items():
            ws = workbook.create_sheet(title=self._sheet_title(name))
            for row in df.itertuples(index=False):
                ws.append([None if pd.isna(value) else value for value in row])

        if not workbook.worksheets:
            workbook.create_sheet(title="Sheet1")
        return workbook

    @staticmethod
    def _coerce_cell(value):
        """Turn numeric text into numbers the way Excel does when opening a CSV"""
        if value is None or pd.isna(value) or value == '':
            return None
        text = str(value).strip()
        if NUMBER_PATTERN.match(text):
            if '.' in text or 'e' in text.lower():
                return float(text)
            return int(text)
        return value

    @staticmethod
    def _sheet_title(name):
        title = INVALID_TITLE_CHARS.sub('_', str(name)).strip("'")[:31]
        return title or "Sheet1"
