import logging
import unittest
from unittest.mock import patch

from metadata_api.core.config import Settings, get_settings
from metadata_api.core.logging import configure_logging


class TestConfigureLogging(unittest.TestCase):
    def tearDown(self) -> None:
        configure_logging()

    def test_level_comes_from_settings(self):
        with patch.object(get_settings(), "log_level", "WARNING"):
            logger = configure_logging()
        self.assertEqual(logger.name, "metadata_api")
        self.assertEqual(logger.level, logging.WARNING)

    def test_single_handler_across_calls(self):
        first = configure_logging()
        second = configure_logging()
        self.assertIs(first, second)
        self.assertEqual(len(second.handlers), 1)
        self.assertFalse(second.propagate)

    def test_module_loggers_share_the_handler(self):
        root = configure_logging()
        module_logger = logging.getLogger("metadata_api.services.watermark_service")
        self.assertTrue(module_logger.hasHandlers())
        with self.assertLogs(root.name, level="WARNING") as captured:
            module_logger.warning("image dropped")
        self.assertEqual(captured.records[0].name, module_logger.name)

    def test_level_names_are_case_insensitive(self):
        self.assertEqual(Settings(log_level="debug").log_level, "DEBUG")


if __name__ == "__main__":
    unittest.main()
