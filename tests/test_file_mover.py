import sys
import shutil
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from excel_utility.core.errors import FileCountMismatchError
from excel_utility.core.file_mover import FileMover
from excel_utility.models.data_models import Settings


class TestFileMover(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.source = self.temp_dir / "Downloads"
        self.destination = self.temp_dir / "OneDrive" / "Reports"
        self.source.mkdir()
        for name in ("Report_B.xlsx", "Report_A.xlsx", "notes.txt"):
            (self.source / name).write_text(name)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_find_files_matches_pattern_in_name_order(self):
        mover = FileMover(self.source, self.destination, "Report_*.xlsx")
        self.assertEqual([p.name for p in mover.find_files()], ["Report_A.xlsx", "Report_B.xlsx"])

    def test_move_into_dated_folder(self):
        mover = FileMover(self.source, self.destination, "Report_*.xlsx", "%Y-%m")
        results = mover.move_files(when=datetime(2024, 5, 17))

        target = self.destination / "2024-05"
        self.assertTrue(all(r.success for r in results))
        self.assertEqual([Path(r.output_path) for r in results], [target / "Report_A.xlsx", target / "Report_B.xlsx"])
        self.assertFalse((self.source / "Report_A.xlsx").exists())
        self.assertTrue((self.source / "notes.txt").exists())

    def test_move_without_date_folder_overwrites_existing(self):
        self.destination.mkdir(parents=True)
        (self.destination / "Report_A.xlsx").write_text("old")

        results = FileMover(self.source, self.destination, "Report_A.xlsx", "").move_files()

        self.assertTrue(results[0].success)
        self.assertEqual((self.destination / "Report_A.xlsx").read_text(), "Report_A.xlsx")

    def test_expected_count_mismatch_moves_nothing(self):
        mover = FileMover(self.source, self.destination, "Report_*.xlsx", expected_count=9)
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(FileCountMismatchError) as ctx:
                mover.move_files()
        self.assertEqual((ctx.exception.expected, ctx.exception.found), (9, 2))
        self.assertTrue((self.source / "Report_A.xlsx").exists())
        self.assertFalse(self.destination.exists())

    def test_expected_count_match_moves_files(self):
        mover = FileMover(self.source, self.destination, "Report_*.xlsx", "", expected_count=2)
        self.assertEqual(len(mover.move_files()), 2)

    def test_no_matching_files(self):
        self.assertEqual(FileMover(self.source, self.destination, "*.csv").move_files(), [])

    def test_missing_source_folder(self):
        with self.assertRaises(FileNotFoundError):
            FileMover(self.temp_dir / "missing", self.destination).find_files()

    def test_from_settings(self):
        settings = Settings(move_source_path=str(self.source), move_destination_path=str(self.destination),
                            move_pattern="*.txt", move_date_folder_format="", move_expected_count=1)
        mover = FileMover.from_settings(settings)
        self.assertEqual(mover.pattern, "*.txt")
        self.assertEqual(mover.target_folder(), self.destination)
        self.assertEqual(mover.expected_count, 1)


if __name__ == '__main__':
    unittest.main()
