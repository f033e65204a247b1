"""Cookie header parsing and Set-Cookie serialization.

``parse_cookie`` reads a request ``Cookie`` header into a dict and
``serialize_cookie`` renders one ``Set-Cookie`` value. Both follow the
semantics browsers and API Gateway expect:

    parse_cookie("a=1; b=%7B%7D")            -> {"a": "1", "b": "{}"}
    serialize_cookie("a", "1", {"path": "/"}) -> "a=1; Path=/"
"""

from __future__ import annotations

import datetime as dt
import math
import re
import urllib.parse
from collections.abc import Mapping
from email.utils import format_datetime
from typing import Any

from lambda_proxy_utils.errors import LambdaProxyError

# RFC 7230 field-content: HTAB, visible ASCII and obs-text.
_field_content = re.compile(r"^[\t\x20-\x7e\x80-\xff]+$")
_cookie_name = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_pair_split = re.compile(r"; *")

# encodeURIComponent leaves these unescaped.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_SAME_SITE = {"strict": "Strict", "lax": "Lax", "none": "None"}

_OPTION_ALIASES = {
    "maxAge": "max_age",
    "httpOnly": "http_only",
    "httponly": "http_only",
    "sameSite": "same_site",
    "samesite": "same_site",
}


def parse_cookie(header: str) -> dict[str, str]:
    out: dict[str, str] = {}
    raw = str(header or "")
    if not raw:
        return out

    for pair in _pair_split.split(raw):
        eq_idx = pair.find("=")
        if eq_idx < 0:
            continue

        key = pair[:eq_idx].strip()
        if not key or key in out:
            continue

        value = pair[eq_idx + 1 :].strip()
        if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
            value = value[1:-1]

        out[key] = _decode(value)
    return out


def serialize_cookie(name: str, value: str, options: Mapping[str, Any] | None = None) -> str:
    opts = normalize_cookie_options(options)

    if not _cookie_name.match(str(name or "")):
        raise LambdaProxyError("cookie.invalid_name", f"invalid cookie name: {name!r}")

    encoded = urllib.parse.quote(str(value), safe=_URI_COMPONENT_SAFE)
    if encoded and not _field_content.match(encoded):
        raise LambdaProxyError("cookie.invalid_value", f"invalid value for cookie {name!r}")

    parts = [f"{name}={encoded}"]

    if opts.get("max_age") is not None:
        max_age = opts["max_age"]
        if isinstance(max_age, bool) or not isinstance(max_age, (int, float)) or not math.isfinite(max_age):
            raise LambdaProxyError("cookie.invalid_option", "max_age must be a finite number")
        parts.append(f"Max-Age={math.floor(max_age)}")

    if opts.get("domain"):
        domain = str(opts["domain"])
        if not _field_content.match(domain):
            raise LambdaProxyError("cookie.invalid_option", "invalid cookie domain")
        parts.append(f"Domain={domain}")

    if opts.get("path"):
        path = str(opts["path"])
        if not _field_content.match(path):
            raise LambdaProxyError("cookie.invalid_option", "invalid cookie path")
        parts.append(f"Path={path}")

    if opts.get("expires") is not None:
        expires = opts["expires"]
        if not isinstance(expires, dt.datetime):
            raise LambdaProxyError("cookie.invalid_option", "expires must be a datetime")
        parts.append(f"Expires={http_date(expires)}")

    if opts.get("http_only"):
        parts.append("HttpOnly")

    if opts.get("secure"):
        parts.append("Secure")

    same_site = opts.get("same_site")
    if same_site:
        if same_site is True:
            parts.append("SameSite=Strict")
        else:
            resolved = _SAME_SITE.get(str(same_site).strip().lower())
            if resolved is None:
                raise LambdaProxyError("cookie.invalid_option", f"invalid same_site value: {same_site!r}")
            parts.append(f"SameSite={resolved}")

    return "; ".join(parts)


def normalize_cookie_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in (options or {}).items():
        out[_OPTION_ALIASES.get(str(key), str(key))] = value
    return out


def http_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.UTC)
    return format_datetime(value.astimezone(dt.UTC).replace(microsecond=0), usegmt=True)


def _decode(value: str) -> str:
    if "%" not in value:
        return value
    try:
        return urllib.parse.unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value
