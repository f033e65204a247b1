from __future__ import annotations

import json as jsonlib
import urllib.parse
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from lambda_proxy_utils.cookies import parse_cookie
from lambda_proxy_utils.logger import get_logger
from lambda_proxy_utils.negotiation import (
    accepts_charsets,
    accepts_encodings,
    accepts_languages,
    accepts_types,
    type_is,
)
from lambda_proxy_utils.util import deep_get, to_str, value_filter

# Key that marks a mapping as the output of Request.to_dict().
SERIALIZED_MARKER = "rawLambdaEvent"

_MISSING: Any = object()


@dataclass(frozen=True, slots=True)
class ParsedUrl:
    href: str = ""
    protocol: str = ""
    host: str = ""
    hostname: str = ""
    port: str = ""
    pathname: str = ""
    search: str = ""
    query: dict[str, Any] = field(default_factory=dict)
    hash: str = ""

    # Holds a dict, so instances compare by value but are not hashable.
    __hash__ = None  # type: ignore[assignment]

    @property
    def path(self) -> str:
        return self.pathname + self.search

    def to_dict(self) -> dict[str, Any]:
        return {
            "href": self.href,
            "protocol": self.protocol,
            "host": self.host,
            "hostname": self.hostname,
            "port": self.port,
            "pathname": self.pathname,
            "search": self.search,
            "query": dict(self.query),
            "hash": self.hash,
        }


def parse_url(value: Any) -> ParsedUrl:
    raw = to_str(value).strip()
    if not raw:
        return ParsedUrl()

    try:
        parts = urllib.parse.urlsplit(raw)
        port = parts.port
    except ValueError:
        return ParsedUrl(href=raw)

    query: dict[str, Any] = {}
    for key, val in urllib.parse.parse_qsl(parts.query, keep_blank_values=True):
        if key not in query:
            query[key] = val
        elif isinstance(query[key], list):
            query[key].append(val)
        else:
            query[key] = [query[key], val]

    return ParsedUrl(
        href=raw,
        protocol=f"{parts.scheme}:" if parts.scheme else "",
        host=parts.netloc.rsplit("@", 1)[-1].lower(),
        hostname=parts.hostname or "",
        port=str(port) if port is not None else "",
        pathname=parts.path,
        search=f"?{parts.query}" if parts.query else "",
        query=query,
        hash=f"#{parts.fragment}" if parts.fragment else "",
    )


@dataclass(frozen=True, slots=True)
class Request:
    """Express-style view over an API Gateway proxy integration event.

    Every field is computed once at construction; lookups never raise and
    fall back to empty defaults.
    """

    body: Any
    headers: dict[str, Any]
    cookies: dict[str, Any]
    ip: str
    params: dict[str, Any]
    query: dict[str, Any]
    path: str
    method: str
    referrer: ParsedUrl
    user_agent: str
    is_base64_encoded: bool
    raw_event: dict[str, Any]
    # No field of the proxy event reliably identifies an XMLHttpRequest.
    xhr: bool

    # Holds dicts, so instances compare by value but are not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, event: Mapping[str, Any] | None = None) -> None:
        for name, value in _fields_from_event(event).items():
            object.__setattr__(self, name, value)

    def get(self, field: str) -> Any:
        """Query parameter first, then cookie, then header.

        An empty query value defers to the cookie. A cookie that is present
        wins even when its filtered value is ``None`` or ``False``.
        """
        val = self.query.get(field)
        if not val:
            val = self.cookies.get(field, _MISSING)
        if val is not _MISSING:
            return val
        return self.headers.get(str(field).lower())

    def get_query_param(self, param: str) -> Any:
        return value_filter(self.query.get(param))

    def get_cookie(self, name: str) -> Any:
        return self.cookies.get(str(name).lower())

    def get_header(self, field: str) -> Any:
        return self.headers.get(str(field).lower())

    def is_type(self, *types: Any) -> bool:
        """True when the Content-Type header matches one of ``types``.

        With ``Content-Type: text/html; charset=utf-8`` the patterns ``html``,
        ``text/html`` and ``text/*`` all match while ``json`` does not.
        """
        return bool(type_is(self.headers.get("content-type"), *types))

    def accepts(self, *types: Any) -> str | list[str] | bool:
        """Best acceptable type among ``types`` per the Accept header.

        Candidates may be extension names (``json``), full types, a
        comma-separated string, or lists. Returns the matching candidate as
        given, or False, in which case a 406 is usually appropriate. Without
        an Accept header the first candidate wins.
        """
        return accepts_types(self.headers.get("accept"), *types)

    def accepts_charsets(self, *charsets: Any) -> str | list[str] | bool:
        return accepts_charsets(self.headers.get("accept-charset"), *charsets)

    def accepts_encodings(self, *encodings: Any) -> str | list[str] | bool:
        return accepts_encodings(self.headers.get("accept-encoding"), *encodings)

    def accepts_languages(self, *languages: Any) -> str | list[str] | bool:
        return accepts_languages(self.headers.get("accept-language"), *languages)

    def context(self, property_path: str) -> Any:
        """Dotted lookup into the event's ``requestContext``."""
        return deep_get(self.raw_event, f"requestContext.{property_path}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "body": self.body,
            "headers": dict(self.headers),
            "cookies": dict(self.cookies),
            "ip": self.ip,
            "params": dict(self.params),
            "query": dict(self.query),
            "path": self.path,
            "xhr": self.xhr,
            "method": self.method,
            "referrer": self.referrer.to_dict(),
            "userAgent": self.user_agent,
            "isBase64Encoded": self.is_base64_encoded,
            SERIALIZED_MARKER: self.raw_event,
        }


def parse_headers(event: Mapping[str, Any] | None) -> dict[str, Any]:
    headers = deep_get(event, "headers")
    if not isinstance(headers, Mapping):
        return {}

    out: dict[str, Any] = {}
    for key, value in headers.items():
        lower = str(key).lower()
        out[lower] = value
        if lower == "referer":
            out["referrer"] = value
    return out


def parse_cookies(cookie_string: Any) -> dict[str, Any]:
    return {key.lower(): value_filter(value) for key, value in parse_cookie(to_str(cookie_string)).items()}


def parse_body(event: Mapping[str, Any] | None) -> Any:
    body = deep_get(event, "body")
    if body is None or body == "":
        return None
    if not isinstance(body, str):
        return body
    if deep_get(event, "isBase64Encoded"):
        return body

    try:
        return jsonlib.loads(body)
    except (ValueError, RecursionError):
        get_logger().debug("request body is not json", {"length": len(body)})
        return body


def _fields_from_event(event: Mapping[str, Any] | None) -> dict[str, Any]:
    if event is not None and not isinstance(event, Mapping):
        get_logger().warn("ignoring non-mapping event", {"type": type(event).__name__})
        event = None

    source: Mapping[str, Any] = event or {}
    stored: Mapping[str, Any] = {}
    if SERIALIZED_MARKER in source:
        stored = source
        raw = source.get(SERIALIZED_MARKER)
        source = raw if isinstance(raw, Mapping) else {}

    def pick(key: str, compute: Any) -> Any:
        value = stored.get(key)
        return value if value else compute()

    headers = pick("headers", lambda: parse_headers(source))
    return {
        "body": pick("body", lambda: parse_body(source)),
        "headers": headers,
        "cookies": pick("cookies", lambda: parse_cookies(headers.get("cookie"))),
        "ip": pick("ip", lambda: to_str(deep_get(source, "requestContext.identity.sourceIp"))),
        "params": pick("params", lambda: dict(deep_get(source, "pathParameters") or {})),
        "query": pick("query", lambda: dict(deep_get(source, "queryStringParameters") or {})),
        "path": pick("path", lambda: to_str(deep_get(source, "path"))),
        "method": pick("method", lambda: to_str(deep_get(source, "httpMethod")).upper() or "GET"),
        "referrer": parse_url(headers.get("referrer")),
        "user_agent": pick("userAgent", lambda: to_str(deep_get(source, "requestContext.identity.userAgent"))),
        "is_base64_encoded": bool(pick("isBase64Encoded", lambda: deep_get(source, "isBase64Encoded"))),
        "raw_event": dict(source),
        "xhr": False,
    }
