from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

SERVER_ERROR_MESSAGE = _("Something went wrong")

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", _("Validation failed")),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", _("Authentication required")),
    status.HTTP_403_FORBIDDEN: (
        "FORBIDDEN",
        _("You do not have permission to perform this action"),
    ),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", _("Resource not found")),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", _("Method not allowed")),
    status.HTTP_406_NOT_ACCEPTABLE: ("NOT_ACCEPTABLE", _("Not acceptable")),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        _("Unsupported media type"),
    ),
    status.HTTP_429_TOO_MANY_REQUESTS: ("TOO_MANY_REQUESTS", _("Request was throttled")),
    status.HTTP_500_INTERNAL_SERVER_ERROR: ("SERVER_ERROR", SERVER_ERROR_MESSAGE),
    status.HTTP_503_SERVICE_UNAVAILABLE: (
        "SERVICE_UNAVAILABLE",
        _("Service temporarily unavailable"),
    ),
}

# Checked in order; the first matching class decides code and fallback message.
EXCEPTION_CODES: Tuple[Tuple[Tuple[type, ...], str, Any], ...] = (
    ((ValidationError,), "VALIDATION_ERROR", _("Validation failed")),
    ((ParseError,), "VALIDATION_ERROR", _("Malformed request")),
    ((AuthenticationFailed,), "UNAUTHORIZED", _("Authentication failed")),
    ((NotAuthenticated,), "UNAUTHORIZED", _("Authentication required")),
    (
        (PermissionDenied, DjangoPermissionDenied),
        "FORBIDDEN",
        _("You do not have permission to perform this action"),
    ),
    ((NotFound, Http404), "NOT_FOUND", _("Resource not found")),
    ((MethodNotAllowed,), "METHOD_NOT_ALLOWED", _("Method not allowed")),
    ((Throttled,), "TOO_MANY_REQUESTS", _("Request was throttled")),
)

# Codes whose DRF payload is meaningful enough to forward as details.
_DETAIL_CODES = {"VALIDATION_ERROR"}


class ApplicationError(Exception):
    """
    Error raised from services or views that should reach the client as-is.

    Args:
        code: Machine readable error code.
        message: Human readable explanation.
        status_code: Explicit HTTP status; the code mapping is used when omitted.
        details: Structured details for clients.
        hint: Remediation hint.
        extra: Additional machine readable fields.
        headers: Headers to include in the response.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.extra = extra
        self.headers = headers

    def to_response(self) -> Response:
        return error_response(
            self.code,
            str(self.message),
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
            headers=self.headers,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every error leaves as ``{"error": {...}}``."""

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info(
            "Handled application error", code=exc.code, status=exc.status_code
        )
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_django_validation_payload(exc))

    response = drf_exception_handler(exc, context)
    if response is None:
        bound_logger.exception("Unhandled exception bubbled to global handler")
        return error_response(
            "SERVER_ERROR",
            str(SERVER_ERROR_MESSAGE),
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    status_code = response.status_code
    code, message, details, hint = _describe(
        exc, response.data, status_code, context.get("view")
    )
    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)

    headers = _forwarded_headers(response)
    return error_response(
        code,
        message,
        details,
        http_status=status_code,
        hint=hint,
        headers=headers,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _django_validation_payload(exc: DjangoValidationError):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    if hasattr(exc, "messages"):
        return list(exc.messages)
    return {"detail": getattr(exc, "message", "Validation failed")}


def _forwarded_headers(response) -> Optional[Dict[str, str]]:
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    # Content negotiation sets the content type again on the new response.
    kept = {
        key: value for key, value in headers.items() if key.lower() != "content-type"
    }
    return kept or None


def _describe(
    exc: Exception, payload: Any, status_code: int, view: Any = None
) -> Tuple[str, str, Optional[Any], Optional[str]]:
    for classes, code, fallback in EXCEPTION_CODES:
        if isinstance(exc, classes):
            break
    else:
        code, fallback = STATUS_CODE_DEFAULTS.get(
            status_code,
            (
                "SERVER_ERROR" if status_code >= 500 else "UNKNOWN_ERROR",
                SERVER_ERROR_MESSAGE if status_code >= 500 else _("Request failed"),
            ),
        )
        details = payload if _forwardable(status_code, payload) else None
        return code, _extract_message(payload, fallback, status_code), details, None

    if isinstance(exc, ValidationError):
        return code, str(fallback), payload, None

    details = payload if code in _DETAIL_CODES else None
    hint = None
    if isinstance(exc, MethodNotAllowed):
        allowed = getattr(view, "allowed_methods", None) or []
        details = {"allowedMethods": list(allowed)}
    elif isinstance(exc, Throttled) and getattr(exc, "wait", None) is not None:
        details = {"retryAfter": exc.wait}
        hint = "Wait before retrying this request."
    return code, _extract_message(payload, fallback, status_code), details, hint


def _forwardable(status_code: int, payload: Any) -> bool:
    if status_code >= 500:
        return False
    return isinstance(payload, (dict, list)) and bool(payload)


def _extract_message(payload: Any, fallback: Any, status_code: int) -> str:
    if status_code >= 500:
        return str(SERVER_ERROR_MESSAGE)
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return str(fallback)


__all__ = ["ApplicationError", "global_exception_handler"]
