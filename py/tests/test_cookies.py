from __future__ import annotations

import datetime as dt
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from lambda_proxy_utils.cookies import http_date, parse_cookie, serialize_cookie  # noqa: E402
from lambda_proxy_utils.errors import LambdaProxyError  # noqa: E402


class TestParseCookie(unittest.TestCase):
    def test_parses_pairs_and_skips_malformed_segments(self) -> None:
        self.assertEqual(parse_cookie("a=b; c; =bad; d=e"), {"a": "b", "d": "e"})
        self.assertEqual(parse_cookie(""), {})

    def test_first_occurrence_wins(self) -> None:
        self.assertEqual(parse_cookie("a=1; a=2"), {"a": "1"})

    def test_strips_quotes_and_decodes(self) -> None:
        self.assertEqual(parse_cookie('a="quoted"; b=j%3A%7B%7D'), {"a": "quoted", "b": "j:{}"})

    def test_keeps_undecodable_values(self) -> None:
        self.assertEqual(parse_cookie("a=%E0%A4%A"), {"a": "%E0%A4%A"})

    def test_values_may_contain_equals(self) -> None:
        self.assertEqual(parse_cookie("token=abc==; x = y "), {"token": "abc==", "x": "y"})


class TestSerializeCookie(unittest.TestCase):
    def test_encodes_value(self) -> None:
        self.assertEqual(serialize_cookie("a", "hello world;"), "a=hello%20world%3B")
        self.assertEqual(serialize_cookie("a", ""), "a=")

    def test_renders_attributes_in_order(self) -> None:
        out = serialize_cookie(
            "sid",
            "1",
            {
                "max_age": 60.9,
                "domain": "example.com",
                "path": "/",
                "expires": dt.datetime(2024, 1, 1, 12, 0, 0, tzinfo=dt.UTC),
                "httpOnly": True,
                "secure": True,
                "sameSite": True,
            },
        )
        self.assertEqual(
            out,
            "sid=1; Max-Age=60; Domain=example.com; Path=/; "
            "Expires=Mon, 01 Jan 2024 12:00:00 GMT; HttpOnly; Secure; SameSite=Strict",
        )

    def test_same_site_values(self) -> None:
        self.assertTrue(serialize_cookie("a", "1", {"same_site": "none"}).endswith("SameSite=None"))
        with self.assertRaises(LambdaProxyError):
            serialize_cookie("a", "1", {"same_site": "sometimes"})

    def test_rejects_invalid_input(self) -> None:
        with self.assertRaises(LambdaProxyError) as cm:
            serialize_cookie("a;b", "1")
        self.assertEqual(cm.exception.code, "cookie.invalid_name")
        with self.assertRaises(LambdaProxyError):
            serialize_cookie("a", "1", {"expires": "tomorrow"})
        with self.assertRaises(LambdaProxyError):
            serialize_cookie("a", "1", {"max_age": float("inf")})
        with self.assertRaises(LambdaProxyError):
            serialize_cookie("a", "1", {"path": "/\n"})

    def test_http_date_treats_naive_as_utc(self) -> None:
        self.assertEqual(http_date(dt.datetime(1970, 1, 1, 0, 0, 1)), "Thu, 01 Jan 1970 00:00:01 GMT")


if __name__ == "__main__":
    unittest.main()
