import io
import re
import sys
import shutil
import logging
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from excel_utility.core import log_service
from excel_utility.core.config_manager import ConfigManager
from excel_utility.core.log_service import DailyFileHandler, LogFormatter, SUCCESS

LINE_PATTERN = re.compile(r'^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3}\] \[(\w+)\] (.*)$')


class TestLogService(unittest.TestCase):

    def setUp(self):
        self.base_dir = Path(tempfile.mkdtemp())
        self.logger = logging.getLogger("excel_utility.test_log_service")
        self.logger.propagate = False
        self.logger.setLevel(logging.DEBUG)

    def tearDown(self):
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
        shutil.rmtree(self.base_dir, ignore_errors=True)

    def attach(self, handler):
        handler.setFormatter(LogFormatter())
        self.logger.addHandler(handler)
        return handler

    def today_log(self):
        return self.base_dir / "logs" / f"{datetime.now().strftime('%Y-%m-%d')}.log"

    def test_writes_dated_file_with_expected_format(self):
        self.attach(DailyFileHandler(self.base_dir))

        self.logger.info("converted A.csv")
        self.logger.log(SUCCESS, "all done")

        lines = self.today_log().read_text(encoding='utf-8').splitlines()
        self.assertEqual(len(lines), 2)
        first = LINE_PATTERN.match(lines[0])
        second = LINE_PATTERN.match(lines[1])
        self.assertEqual(first.groups(), ("INFO", "converted A.csv"))
        self.assertEqual(second.groups(), ("SUCCESS", "all done"))

    def test_falls_back_to_console_when_file_unwritable(self):
        # a file where the logs folder should be makes directory creation fail
        (self.base_dir / "logs").write_text("not a folder")
        stream = io.StringIO()
        handler = self.attach(DailyFileHandler(self.base_dir, fallback_stream=stream))

        self.logger.error("disk full")
        self.logger.warning("still logging")

        self.assertTrue(handler.file_failed)
        output = stream.getvalue()
        self.assertIn("logging to console only", output)
        self.assertIn("[ERROR] disk full", output)
        self.assertIn("[WARNING] still logging", output)

    def test_log_message_accepts_level_names(self):
        with self.assertLogs(level='DEBUG') as logs:
            log_service.log_message("plain")
            log_service.log_message("careful", "warning")
            log_service.log_message("yay", "SUCCESS")
            log_service.log_message("odd", "VERBOSE")
        self.assertEqual(logs.output, [
            "INFO:root:plain",
            "WARNING:root:careful",
            "SUCCESS:root:yay",
            "INFO:root:odd",
        ])

    def test_console_mirroring_toggle(self):
        root = logging.getLogger()
        before = list(root.handlers)
        try:
            log_service.set_console_mirroring(True)
            self.assertEqual(len(root.handlers), len(before) + 1)
            log_service.set_console_mirroring(True)
            self.assertEqual(len(root.handlers), len(before) + 1)
            log_service.set_console_mirroring(False)
            self.assertEqual(root.handlers, before)
        finally:
            log_service.set_console_mirroring(False)

    def test_settings_load_warning_reaches_log_file(self):
        root = logging.getLogger()
        level = root.level
        (self.base_dir / "excel_utility_settings.json").write_text("{not json", encoding='utf-8')
        handler = log_service.setup_logging(self.base_dir, mirror_to_console=False)
        try:
            settings = ConfigManager(self.base_dir).load_settings()
            log_service.apply_log_settings(True)
            self.assertEqual(root.level, logging.DEBUG)
        finally:
            root.removeHandler(handler)
            log_service.set_console_mirroring(False)
            root.setLevel(level)

        self.assertFalse(settings.show_detailed_logs)
        self.assertIn("Failed to load settings", self.today_log().read_text(encoding='utf-8'))


if __name__ == '__main__':
    unittest.main()
