import sys
import shutil
import tempfile
import unittest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from excel_utility.core.errors import SpreadsheetUnavailableError
from excel_utility.core.spreadsheet_session import SpreadsheetSession, SessionState
from excel_utility.models.data_models import SaveMode
from fake_engine import FakeEngine, FakeSheet, factory_for, failing_factory


class TestSpreadsheetSession(unittest.TestCase):

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.source = self.temp_dir / "book.xlsx"
        self.source.write_text("data")
        self.other = self.temp_dir / "other.xlsx"
        self.other.write_text("data")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_initialize_failure_marks_session_unavailable(self):
        session = SpreadsheetSession(engine_factory=failing_factory())
        with self.assertLogs(level='ERROR'):
            self.assertFalse(session.initialize())
        self.assertTrue(session.unavailable)
        self.assertIn("not available", session.unavailable_reason)
        with self.assertRaises(SpreadsheetUnavailableError):
            session.open_document(self.source)
        session.dispose()
        self.assertEqual(session.state, SessionState.DISPOSED)

    def test_open_without_password_passes_no_password(self):
        engine = FakeEngine()
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            session.open_document(self.source)
            self.assertEqual(session.state, SessionState.OPEN)
        self.assertEqual(engine.calls[1], ("open", "book.xlsx", {}))

    def test_open_with_password_passes_it_to_engine(self):
        engine = FakeEngine(open_password="secret")
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            session.open_document(self.source, password="secret")
        self.assertEqual(engine.calls[1], ("open", "book.xlsx", {"password": "secret"}))

    def test_opening_second_document_closes_first(self):
        engine = FakeEngine()
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            first = session.open_document(self.source)
            with self.assertLogs(level='WARNING') as logs:
                session.open_document(self.other)
            self.assertTrue(first.closed)
            self.assertTrue(any("still open" in line for line in logs.output))

    def test_save_as_creates_destination_and_overwrites(self):
        engine = FakeEngine()
        output = self.temp_dir / "nested" / "out" / "book.xlsx"
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            session.open_document(self.source)
            session.save_as(output, SaveMode.PLAIN_CONVERSION)
            session.save_as(output, SaveMode.UNPROTECTED)
        self.assertTrue(output.exists())
        saves = [call for call in engine.calls if call[0] == "save"]
        self.assertEqual([call[3] for call in saves], [False, True])

    def test_remove_protection_continues_after_rejection(self):
        sheets = [
            FakeSheet("Open"),
            FakeSheet("Locked", protected=True, password="other"),
            FakeSheet("Summary", protected=True, password="secret"),
        ]
        engine = FakeEngine(documents={"book.xlsx": {"structure": True, "windows": True, "sheets": sheets}})
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            document = session.open_document(self.source)
            with self.assertLogs(level='WARNING'):
                still_protected = session.remove_protection("secret")
            removed = session.removed_protection

        self.assertEqual(still_protected, ["sheet 'Locked'"])
        self.assertEqual(removed, ["workbook structure", "workbook windows", "sheet 'Summary'"])
        self.assertFalse(document.structure)
        self.assertFalse(document.windows)
        self.assertTrue(sheets[1].protected)
        self.assertFalse(sheets[2].protected)

    def test_close_document_is_idempotent(self):
        engine = FakeEngine()
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            session.close_document()
            session.open_document(self.source)
            session.close_document()
            session.close_document()
            self.assertEqual(session.state, SessionState.CLOSED)
        self.assertEqual(engine.count("close"), 1)

    def test_dispose_releases_in_reverse_order_and_only_once(self):
        engine = FakeEngine(documents={"book.xlsx": {"fail_close": True}})
        session = SpreadsheetSession(engine_factory=factory_for(engine))
        session.initialize()
        session.open_document(self.source)

        with self.assertLogs(level='WARNING'):
            session.dispose()
        session.dispose()

        self.assertEqual(engine.calls[-2:], [("close", "book.xlsx"), ("quit",)])
        self.assertEqual(engine.count("quit"), 1)
        self.assertEqual(session.state, SessionState.DISPOSED)
        with self.assertRaises(SpreadsheetUnavailableError):
            session.open_document(self.source)

    def test_context_manager_disposes_on_error(self):
        engine = FakeEngine()
        with self.assertRaises(ValueError):
            with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
                session.open_document(self.source)
                raise ValueError("boom")
        self.assertEqual(engine.count("quit"), 1)
        self.assertEqual(engine.count("close"), 1)

    def test_failed_open_leaves_no_document(self):
        engine = FakeEngine(fail_open=["book.xlsx"])
        with SpreadsheetSession(engine_factory=factory_for(engine)) as session:
            with self.assertRaises(OSError):
                session.open_document(self.source)
            self.assertFalse(session.has_open_document)
            self.assertEqual(session.state, SessionState.CLOSED)

    def test_dispose_survives_failing_quit(self):
        engine = FakeEngine(fail_quit=True)
        session = SpreadsheetSession(engine_factory=factory_for(engine))
        session.initialize()
        with self.assertLogs(level='WARNING'):
            session.dispose()
        self.assertEqual(session.state, SessionState.DISPOSED)


if __name__ == '__main__':
    unittest.main()
