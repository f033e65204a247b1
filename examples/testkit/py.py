import json as jsonlib
import sys
from datetime import UTC, datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "py" / "src"))
sys.path.insert(0, str(ROOT / "examples" / "handler"))

from handler import handler  # noqa: E402

from lambda_proxy_utils import Request, Response, build_proxy_event  # noqa: E402


def main() -> None:
    event = build_proxy_event(
        "GET",
        "/widgets/7?verbose=true",
        headers={"Accept": "application/json", "Referer": "https://example.com/list?page=2"},
        path_params={"id": "7"},
        cookies={"theme": "dark"},
    )

    req = Request(event)
    assert req.get_query_param("verbose") is True
    assert req.get_cookie("theme") == "dark"
    assert req.referrer.hostname == "example.com"
    assert Request(req.to_dict()).to_dict() == req.to_dict()

    resp = handler(event, None)
    assert resp["statusCode"] == 200
    assert resp["headers"]["Content-Type"] == "application/json"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"
    assert resp["headers"]["Set-Cookie"].startswith("last_widget=7; Max-Age=3600; Path=/; Expires=")
    assert jsonlib.loads(resp["body"]) == {"id": "7", "verbose": True}

    missing = handler(build_proxy_event("GET", "/widgets"), None)
    assert missing["statusCode"] == 404

    fixed = Response(clock=lambda: datetime(2026, 1, 1, tzinfo=UTC))
    out = fixed.cookie("a", "b", max_age=1000).send("ok")
    assert out["headers"]["Set-Cookie"] == "a=b; Max-Age=1; Path=/; Expires=Thu, 01 Jan 2026 00:00:01 GMT"

    print("examples/testkit/py.py: PASS")


if __name__ == "__main__":
    main()
