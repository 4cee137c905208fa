import json
import logging
import unittest
from unittest import mock

from sekolah.config import Settings
from sekolah.core.logging import JsonFormatter, setup_logging


class SetupLoggingTest(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        self._root_level = root.level
        self._root_handlers = list(root.handlers)
        self._sql_level = logging.getLogger("sqlalchemy.engine").level

    def tearDown(self):
        root = logging.getLogger()
        root.setLevel(self._root_level)
        root.handlers[:] = self._root_handlers
        logging.getLogger("sqlalchemy.engine").setLevel(self._sql_level)

    def _setup(self, **values):
        with mock.patch("sekolah.core.logging.get_settings", return_value=Settings(**values)):
            setup_logging()

    def test_sql_statements_follow_flag(self):
        self._setup(LOG_SQL=True)
        self.assertEqual(logging.getLogger("sqlalchemy.engine").level, logging.INFO)

        self._setup(LOG_SQL=False)
        self.assertEqual(logging.getLogger("sqlalchemy.engine").level, logging.WARNING)

    def test_level_and_json_formatter(self):
        self._setup(LOG_LEVEL="debug", LOG_JSON=True)
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0].formatter, JsonFormatter)

    def test_json_formatter_payload(self):
        record = logging.LogRecord("sekolah.test", logging.INFO, __file__, 1, "stok %s", ("habis",), None)
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["message"], "stok habis")
        self.assertEqual(payload["logger"], "sekolah.test")
        self.assertEqual(payload["level"], "INFO")


if __name__ == "__main__":
    unittest.main()
