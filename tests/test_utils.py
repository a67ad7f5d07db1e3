import sys
import unittest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from msoffcrypto.exceptions import DecryptionError, InvalidKeyError

from excel_utility.core.errors import ProtectionRejectedError
from excel_utility.core.utils import Utils


class TestUtils(unittest.TestCase):

    def test_is_supported_file(self):
        self.assertTrue(Utils.is_supported_file("report.csv"))
        self.assertTrue(Utils.is_supported_file("REPORT.TXT"))
        self.assertTrue(Utils.is_supported_file("old.xls"))
        self.assertTrue(Utils.is_supported_file("new.xlsx"))
        self.assertFalse(Utils.is_supported_file("macro.xlsm"))
        self.assertFalse(Utils.is_supported_file("notes.pdf"))
        self.assertFalse(Utils.is_supported_file("no_extension"))

    def test_build_output_path(self):
        self.assertEqual(Utils.build_output_path("/data/A.csv", "/out"), Path("/out") / "A.xlsx")
        self.assertEqual(Utils.build_output_path("/data/B.txt", "/out"), Path("/out") / "B.xlsx")
        self.assertEqual(Utils.build_output_path("/data/sales.2024.xls", "/out"), Path("/out") / "sales.2024.xlsx")

    def test_clean_path(self):
        self.assertEqual(Utils.clean_path('  "C:/Reports"  '), str(Path("C:/Reports")))
        self.assertEqual(Utils.clean_path("'/tmp/out'"), str(Path("/tmp/out")))
        self.assertEqual(Utils.clean_path(""), "")
        self.assertEqual(Utils.clean_path(None), "")

    def test_is_password_error(self):
        self.assertTrue(Utils.is_password_error("The password you supplied is not correct. Verify that the CAPS LOCK key is off."))
        self.assertTrue(Utils.is_password_error(ValueError("book.xlsx is protected with an open password - a password is required")))
        self.assertTrue(Utils.is_password_error(ValueError("The password supplied does not unprotect sheet 'Data'")))
        self.assertTrue(Utils.is_password_error(InvalidKeyError("Key verification failed")))
        self.assertTrue(Utils.is_password_error(DecryptionError("Unencrypted document")))
        self.assertTrue(Utils.is_password_error(ProtectionRejectedError("book.xlsx", ["sheet 'Data'"])))
        self.assertFalse(Utils.is_password_error("Permission denied: 'out.xlsx'"))
        self.assertFalse(Utils.is_password_error(None))

    def test_file_errors_are_not_password_errors(self):
        self.assertFalse(Utils.is_password_error(FileNotFoundError("File not found: C:/Secure/password_list.xlsx")))
        self.assertFalse(Utils.is_password_error(PermissionError("Permission denied: '/data/encrypted/report.xlsx'")))
        self.assertFalse(Utils.is_password_error(ValueError("Could not decode passwords_encrypted.csv")))

    def test_same_file(self):
        self.assertTrue(Utils.same_file("/tmp/a/../a/file.xlsx", "/tmp/a/file.xlsx"))
        self.assertFalse(Utils.same_file("/tmp/a/file.csv", "/tmp/a/file.xlsx"))

    def test_format_elapsed(self):
        self.assertEqual(Utils.format_elapsed(1.234), "1.23s")
        self.assertEqual(Utils.format_elapsed(125), "2m 5s")


if __name__ == '__main__':
    unittest.main()
