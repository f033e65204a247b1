from __future__ import annotations

import base64
import datetime as dt
import decimal
import json as jsonlib
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from lambda_proxy_utils import mime
from lambda_proxy_utils.cookies import normalize_cookie_options, serialize_cookie
from lambda_proxy_utils.errors import LambdaProxyError
from lambda_proxy_utils.headers import Headers, case_variants
from lambda_proxy_utils.logger import get_logger
from lambda_proxy_utils.util import to_str

CORS_HEADERS: dict[str, str] = {"Access-Control-Allow-Origin": "*"}

HEADER_CASES = frozenset({"canonical", "preserve"})
MULTI_VALUE_MODES = frozenset({"list", "multi_value_headers", "binary_case"})

_header_name = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

_OPTION_ALIASES = {
    "statusCode": "status_code",
    "isBase64Encoded": "is_base64_encoded",
    "headerCase": "header_case",
    "multiValue": "multi_value",
}

_MISSING: Any = object()


@dataclass(slots=True)
class ResponseOptions:
    status_code: int = 200
    headers: Mapping[str, Any] | None = None
    cors: bool = False
    is_base64_encoded: bool = False
    header_case: str = "canonical"
    multi_value: str = "list"
    clock: Callable[[], dt.datetime] | None = None


@dataclass(slots=True)
class Response:
    """Express-style builder for API Gateway proxy integration responses.

    Mutators return the builder so calls chain; ``send`` or ``json`` produce
    the payload::

        Response(cors=True).status(201).cookie("sid", "abc").json({"ok": True})

    Finalizing is one-shot by convention. A second ``send`` is allowed, but
    the content type set by the first one is kept.
    """

    status_code: int
    headers: Headers
    cors: bool
    is_base64_encoded: bool
    body: Any
    header_case: str
    multi_value: str
    _clock: Callable[[], dt.datetime]

    def __init__(self, options: ResponseOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        opts = _normalize_options(options, kwargs)

        self.status_code = opts.status_code
        self.body = ""
        self.headers = Headers()
        self.header_case = opts.header_case
        self.multi_value = opts.multi_value
        self._clock = opts.clock or _utc_now

        if opts.headers:
            self.set(opts.headers)

        self.cors = opts.cors
        if self.cors:
            self.set(CORS_HEADERS)

        self.is_base64_encoded = opts.is_base64_encoded

    def set(self, field: str | Mapping[str, Any], value: Any = _MISSING) -> Response:
        """Set header ``field`` to ``value``, or every pair of a mapping.

        Lists become lists of strings; anything else is stringified. Names
        that are not valid header tokens are skipped with a warning.
        """
        if value is _MISSING:
            if not isinstance(field, Mapping):
                get_logger().warn("ignoring header without a value", {"type": type(field).__name__})
                return self
            for key, val in field.items():
                self.set(key, val)
            return self

        name = str(field).strip()
        if not _header_name.match(name):
            get_logger().warn("ignoring invalid header name", {"length": len(name)})
            return self

        if isinstance(value, (list, tuple)):
            self.headers[name] = [to_str(v) for v in value]
        else:
            self.headers[name] = to_str(value)
        return self

    def append(self, field: str, value: Any) -> Response:
        """Add ``value`` to header ``field``, turning it into a list if needed."""
        previous = self.get(field)
        if previous:
            extra = list(value) if isinstance(value, (list, tuple)) else [value]
            prior = previous if isinstance(previous, list) else [previous]
            value = prior + extra
        return self.set(field, value)

    def get(self, field: str) -> Any:
        value = self.headers.get(field)
        return list(value) if isinstance(value, list) else value

    def has(self, field: str) -> bool:
        return field in self.headers

    def remove(self, field: str) -> Response:
        self.headers.pop(field, None)
        return self

    def status(self, code: int) -> Response:
        self.status_code = int(code)
        return self

    def content_type(self, type_: str) -> Response:
        """Set Content-Type, resolving short tokens such as ``html`` or ``.png``."""
        value = str(type_)
        ct = value if "/" in value else mime.lookup(value, mime.DEFAULT_TYPE)
        return self.set("Content-Type", ct)

    type = content_type

    def cookie(self, name: str, value: Any, options: Mapping[str, Any] | None = None, **kwargs: Any) -> Response:
        """Append a Set-Cookie header.

        Mappings and lists are stored as ``j:`` followed by their JSON.
        ``max_age`` is in milliseconds and also sets ``expires``. ``path``
        defaults to ``/``.
        """
        opts = normalize_cookie_options({**(options or {}), **kwargs})

        if isinstance(value, (Mapping, list, tuple)):
            val = "j:" + _dumps(value)
        else:
            val = to_str(value)

        if not opts.get("path"):
            opts["path"] = "/"

        if opts.get("max_age") is not None:
            max_age = opts["max_age"]
            if isinstance(max_age, bool) or not isinstance(max_age, (int, float)):
                raise LambdaProxyError("cookie.invalid_option", "max_age must be a number of milliseconds")
            opts["expires"] = self._clock() + dt.timedelta(milliseconds=max_age)
            opts["max_age"] = max_age / 1000

        return self.append("Set-Cookie", serialize_cookie(name, val, opts))

    def send(self, body: Any = _MISSING) -> dict[str, Any]:
        if body is _MISSING:
            body = self.body

        if isinstance(body, str):
            self._default_content_type("text")
        elif body is None:
            body = ""
            self._default_content_type("text")
        elif isinstance(body, (bytes, bytearray, memoryview)):
            self._default_content_type(mime.DEFAULT_TYPE)
            body = base64.b64encode(bytes(body)).decode("ascii")
            self.is_base64_encoded = True
        else:
            return self.json(body)

        headers, multi = self._render_headers()
        out: dict[str, Any] = {
            "statusCode": self.status_code,
            "headers": headers,
            "body": body,
        }
        if multi is not None:
            out["multiValueHeaders"] = multi
        if self.is_base64_encoded:
            out["isBase64Encoded"] = True

        get_logger().debug("response finalized", {"status": self.status_code, "headers": len(headers)})
        return out

    def json(self, value: Any) -> dict[str, Any]:
        self.content_type("json")
        return self.send(_dumps(value))

    def _default_content_type(self, type_: str) -> None:
        if not self.get("Content-Type"):
            self.content_type(type_)

    def _render_headers(self) -> tuple[dict[str, Any], dict[str, list[str]] | None]:
        rendered = self.headers.to_dict(self.header_case)

        if self.multi_value == "multi_value_headers":
            single: dict[str, Any] = {}
            multi: dict[str, list[str]] = {}
            for key, value in rendered.items():
                values = value if isinstance(value, list) else [value]
                multi[key] = values
                if values:
                    single[key] = values[0]
            return single, multi

        if self.multi_value == "binary_case":
            out: dict[str, Any] = {}
            for key, value in rendered.items():
                if not isinstance(value, list):
                    out[key] = value
                    continue
                variants = case_variants(key, len(value))
                if len(variants) < len(value):
                    get_logger().warn(
                        "dropping header values beyond available casings",
                        {"header": key, "dropped": len(value) - len(variants)},
                    )
                out.update(zip(variants, value))
            return out, None

        return rendered, None


def _normalize_options(options: ResponseOptions | Mapping[str, Any] | None, overrides: Mapping[str, Any]) -> ResponseOptions:
    values: dict[str, Any] = {}
    if isinstance(options, ResponseOptions):
        values = {name: getattr(options, name) for name in ResponseOptions.__dataclass_fields__}
    elif isinstance(options, Mapping):
        values = {_OPTION_ALIASES.get(str(k), str(k)): v for k, v in options.items()}
    values.update({_OPTION_ALIASES.get(str(k), str(k)): v for k, v in overrides.items()})

    header_case = str(values.get("header_case") or "canonical").strip().lower()
    if header_case not in HEADER_CASES:
        raise LambdaProxyError("response.invalid_option", f"unknown header_case: {header_case!r}")

    multi_value = str(values.get("multi_value") or "list").strip().lower()
    if multi_value not in MULTI_VALUE_MODES:
        raise LambdaProxyError("response.invalid_option", f"unknown multi_value: {multi_value!r}")

    headers = values.get("headers")
    clock = values.get("clock")

    return ResponseOptions(
        status_code=int(values.get("status_code") or 200),
        headers=headers if isinstance(headers, Mapping) else None,
        cors=bool(values.get("cors")),
        is_base64_encoded=bool(values.get("is_base64_encoded")),
        header_case=header_case,
        multi_value=multi_value,
        clock=clock if callable(clock) else None,
    )


def _utc_now() -> dt.datetime:
    return dt.datetime.now(tz=dt.UTC)


def _dumps(value: Any) -> str:
    return jsonlib.dumps(
        _finite(value),
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
        default=_json_default,
    )


def _finite(value: Any) -> Any:
    # NaN and Infinity have no JSON form; they serialize as null.
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, Mapping):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    if isinstance(value, decimal.Decimal):
        if not value.is_finite():
            return None
        return int(value) if value == value.to_integral_value() else _finite(float(value))
    if isinstance(value, (set, frozenset)):
        return _finite(list(value))
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
