from __future__ import annotations

import base64
import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(REPO_ROOT / "py" / "src"))

from lambda_proxy_utils import Request, build_proxy_event  # noqa: E402


class TestBuildProxyEvent(unittest.TestCase):
    def test_event_shape(self) -> None:
        event = build_proxy_event("post", "/users/1?expand=true", query={"page": "2"}, path_params={"id": "1"})
        self.assertEqual(event["httpMethod"], "POST")
        self.assertEqual(event["path"], "/users/1")
        self.assertEqual(event["queryStringParameters"], {"expand": "true", "page": "2"})
        self.assertEqual(event["pathParameters"], {"id": "1"})
        self.assertIsNone(event["headers"])
        self.assertEqual(event["requestContext"]["identity"]["sourceIp"], "127.0.0.1")
        self.assertFalse(event["isBase64Encoded"])

    def test_feeds_request(self) -> None:
        event = build_proxy_event(
            "PUT",
            "/items",
            headers={"Content-Type": "application/json"},
            cookies={"session": "abc"},
            body={"name": "widget"},
            user_agent="tests/1.0",
        )
        req = Request(event)
        self.assertEqual(req.method, "PUT")
        self.assertEqual(req.body, {"name": "widget"})
        self.assertEqual(req.get_cookie("session"), "abc")
        self.assertEqual(req.user_agent, "tests/1.0")
        self.assertEqual(req.get("user-agent"), "tests/1.0")
        self.assertTrue(req.is_type("json"))

    def test_bytes_body_is_base64(self) -> None:
        event = build_proxy_event("POST", "/upload", body=b"\x00\x01")
        self.assertTrue(event["isBase64Encoded"])
        self.assertEqual(base64.b64decode(event["body"]), b"\x00\x01")
        self.assertEqual(Request(event).body, event["body"])

    def test_list_body_is_json(self) -> None:
        event = build_proxy_event("POST", "/", body=[1, 2])
        self.assertEqual(json.loads(event["body"]), [1, 2])


if __name__ == "__main__":
    unittest.main()
