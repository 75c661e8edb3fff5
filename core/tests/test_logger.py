"""
core/tests/test_logger.py

The SQLite event logger: insert, filtered queries, newest first.
"""

from __future__ import annotations

import unittest

from core.logging.logic.logger import logger


class TestLogger(unittest.TestCase):
    def setUp(self) -> None:
        logger.clear_logs()

    def tearDown(self) -> None:
        logger.clear_logs()

    def test_log_and_query(self) -> None:
        logger.log(feature="Berkas", event="Created", user_id="u1", username="Ani", reference_id="b1")
        logger.log(feature="Berkas", event="Denied", level="WARNING", user_id="u2", message="edit: no")
        logger.log(feature="Auth", event="LoginSuccess", user_id="u1", username="Ani")

        self.assertEqual(len(logger.fetch_logs()), 3)
        denied = logger.query_logs(level="WARNING")
        self.assertEqual([e.event for e in denied], ["Denied"])
        self.assertEqual(denied[0].username, "system")
        self.assertEqual(len(logger.query_logs(user_id="u1", feature="Berkas")), 1)
        self.assertEqual(logger.query_logs(reference_id="b1")[0].event, "Created")

    def test_newest_first(self) -> None:
        for event in ("a", "b", "c"):
            logger.log(feature="Test", event=event)
        self.assertEqual([e.event for e in logger.query_logs(feature="Test")], ["c", "b", "a"])
        self.assertEqual(len(logger.query_logs(feature="Test", limit=2)), 2)

    def test_unknown_level_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            logger.log(feature="Test", event="x", level="LOUD")
        logger.log(feature="Test", event="y", level="error")
        entry = logger.fetch_logs(limit=1)[0]
        self.assertEqual(entry.log_level, "ERROR")
        self.assertTrue(entry.is_problem())

    def test_unknown_filter_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            logger.query_logs(colour="red")

    def test_as_dict_has_local_time(self) -> None:
        logger.log(feature="Test", event="x")
        data = logger.fetch_logs(limit=1)[0].as_dict()
        self.assertIn("timestamp_utc", data)
        self.assertIn("timestamp", data)


if __name__ == "__main__":
    unittest.main()
