from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class LambdaProxyError(Exception):
    code: str
    message: str
    status_code: int | None = None
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def with_details(self, details: dict[str, Any]) -> LambdaProxyError:
        self.details = details
        return self

    def with_status_code(self, status_code: int) -> LambdaProxyError:
        self.status_code = int(status_code)
        return self


def status_for_error_code(code: str) -> int:
    """Map an ``app.*`` error code to its HTTP status; unknown codes are 500.

    ``app.not_acceptable`` and ``app.unsupported_media_type`` pair with
    ``Request.accepts`` and ``Request.is_type`` returning no match.
    """
    match code:
        case "app.bad_request" | "app.validation_failed":
            return 400
        case "app.unauthorized":
            return 401
        case "app.forbidden":
            return 403
        case "app.not_found":
            return 404
        case "app.method_not_allowed":
            return 405
        case "app.not_acceptable":
            return 406
        case "app.unsupported_media_type":
            return 415
        case _:
            return 500


def error_response(
    code: str,
    message: str,
    *,
    status_code: int | None = None,
    headers: dict[str, Any] | None = None,
    details: dict[str, Any] | None = None,
    cors: bool = False,
) -> dict[str, Any]:
    from lambda_proxy_utils.response import Response, ResponseOptions

    error: dict[str, Any] = {"code": str(code), "message": str(message)}
    if details is not None:
        error["details"] = details

    status = int(status_code) if status_code and status_code > 0 else status_for_error_code(code)
    res = Response(ResponseOptions(status_code=status, headers=headers, cors=cors))
    return res.json({"error": error})


def response_for_error(exc: Exception, *, cors: bool = False) -> dict[str, Any]:
    if isinstance(exc, LambdaProxyError):
        return error_response(
            exc.code,
            exc.message,
            status_code=exc.status_code,
            details=exc.details,
            cors=cors,
        )
    return error_response("app.internal", "internal error", cors=cors)
