from __future__ import annotations

import logging
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

import lambda_proxy_utils as lpu  # noqa: E402
from lambda_proxy_utils.logger import sanitize_log_string  # noqa: E402


class TestLogger(unittest.TestCase):
    def tearDown(self) -> None:
        lpu.set_logger(None)

    def test_default_logger_is_noop_and_reset_by_none(self) -> None:
        self.assertIsInstance(lpu.get_logger(), lpu.NoOpLogger)
        custom = lpu.StdLogger()
        lpu.set_logger(custom)
        self.assertIs(lpu.get_logger(), custom)
        lpu.set_logger(None)
        self.assertIsInstance(lpu.get_logger(), lpu.NoOpLogger)

    def test_noop_logger_satisfies_protocol(self) -> None:
        noop = lpu.NoOpLogger()
        self.assertIsInstance(noop, lpu.StructuredLogger)
        self.assertIs(noop.with_request_id("r"), noop)
        self.assertTrue(noop.is_healthy())
        self.assertEqual(noop.get_stats(), {})

    def test_std_logger_merges_fields_and_strips_newlines(self) -> None:
        base = logging.getLogger("lambda_proxy_utils.test.std")
        log = lpu.StdLogger(base).with_request_id("req-1")
        with self.assertLogs(base, level="INFO") as cm:
            log.info("hello\r\nworld", {"status": 200})
        record = cm.records[0]
        self.assertEqual(record.getMessage(), "helloworld")
        self.assertEqual(record.fields, {"request_id": "req-1", "status": 200})

    def test_std_logger_counts_calls(self) -> None:
        base = logging.getLogger("lambda_proxy_utils.test.stats")
        log = lpu.StdLogger(base)
        with self.assertLogs(base, level="DEBUG"):
            log.warn("a")
            log.warn("b")
            log.debug("c")
        self.assertEqual(log.get_stats(), {"warn": 2, "debug": 1})

    def test_request_parsing_logs_through_installed_logger(self) -> None:
        base = logging.getLogger("lambda_proxy_utils.test.request")
        lpu.set_logger(lpu.StdLogger(base))
        with self.assertLogs(base, level="DEBUG") as cm:
            req = lpu.request(lpu.build_proxy_event("POST", "/", body="plain text"))
        self.assertEqual(req.body, "plain text")
        self.assertIn("request body is not json", [r.getMessage() for r in cm.records])

    def test_sanitize_log_string(self) -> None:
        self.assertEqual(sanitize_log_string("a\nb\rc"), "abc")
        self.assertEqual(sanitize_log_string(""), "")


if __name__ == "__main__":
    unittest.main()
