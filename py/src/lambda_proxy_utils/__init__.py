"""Express-style request and response helpers for API Gateway proxy integrations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lambda_proxy_utils.cookies import parse_cookie, serialize_cookie
from lambda_proxy_utils.errors import LambdaProxyError, error_response, response_for_error, status_for_error_code
from lambda_proxy_utils.headers import Headers, normalize_header_name
from lambda_proxy_utils.logger import NoOpLogger, StdLogger, StructuredLogger, get_logger, set_logger
from lambda_proxy_utils.mime import lookup as mime_lookup
from lambda_proxy_utils.negotiation import best_match, type_is
from lambda_proxy_utils.request import ParsedUrl, Request, parse_body, parse_cookies, parse_headers
from lambda_proxy_utils.response import CORS_HEADERS, Response, ResponseOptions
from lambda_proxy_utils.testkit import build_proxy_event
from lambda_proxy_utils.util import value_filter


def request(event: Mapping[str, Any] | None = None) -> Request:
    return Request(event)


def response(options: ResponseOptions | Mapping[str, Any] | None = None, **kwargs: Any) -> Response:
    return Response(options, **kwargs)


__all__ = [
    "CORS_HEADERS",
    "Headers",
    "LambdaProxyError",
    "NoOpLogger",
    "ParsedUrl",
    "Request",
    "Response",
    "ResponseOptions",
    "StdLogger",
    "StructuredLogger",
    "best_match",
    "build_proxy_event",
    "error_response",
    "get_logger",
    "mime_lookup",
    "normalize_header_name",
    "parse_body",
    "parse_cookie",
    "parse_cookies",
    "parse_headers",
    "request",
    "response",
    "response_for_error",
    "serialize_cookie",
    "set_logger",
    "status_for_error_code",
    "type_is",
    "value_filter",
]
