from __future__ import annotations

import base64
import json as jsonlib
import urllib.parse
from typing import Any


def build_proxy_event(
    method: str = "GET",
    path: str = "/",
    *,
    headers: dict[str, str] | None = None,
    query: dict[str, str] | None = None,
    path_params: dict[str, str] | None = None,
    cookies: dict[str, str] | None = None,
    body: Any = None,
    is_base64: bool = False,
    source_ip: str = "127.0.0.1",
    user_agent: str = "",
    resource: str = "",
    stage: str = "test",
    request_id: str = "test-request",
) -> dict[str, Any]:
    """Build an API Gateway REST (v1) proxy integration event.

    A query string embedded in ``path`` is merged into ``query``. Mappings
    and lists given as ``body`` are JSON encoded; bytes are base64 encoded
    and flag the event as such.
    """
    raw_path = str(path or "/").strip() or "/"
    query_out: dict[str, str] = {}
    if "?" in raw_path:
        raw_path, raw_query = raw_path.split("?", 1)
        query_out.update(dict(urllib.parse.parse_qsl(raw_query, keep_blank_values=True)))
    query_out.update({str(k): str(v) for k, v in (query or {}).items()})

    headers_out = dict(headers or {})
    if cookies:
        headers_out["Cookie"] = "; ".join(f"{k}={urllib.parse.quote(str(v))}" for k, v in cookies.items())
    if user_agent:
        headers_out.setdefault("User-Agent", user_agent)

    body_out: Any = body
    if isinstance(body, (bytes, bytearray)):
        body_out = base64.b64encode(bytes(body)).decode("ascii")
        is_base64 = True
    elif isinstance(body, (dict, list)):
        body_out = jsonlib.dumps(body)

    upper = str(method or "").strip().upper() or "GET"
    return {
        "resource": resource or raw_path,
        "path": raw_path,
        "httpMethod": upper,
        "headers": headers_out or None,
        "queryStringParameters": query_out or None,
        "pathParameters": dict(path_params) if path_params else None,
        "stageVariables": None,
        "requestContext": {
            "stage": stage,
            "requestId": request_id,
            "resourcePath": resource or raw_path,
            "httpMethod": upper,
            "identity": {
                "sourceIp": source_ip,
                "userAgent": user_agent,
            },
        },
        "body": body_out,
        "isBase64Encoded": bool(is_base64),
    }
