from typing import Any, Optional

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.utils import error_response
from apps.carts.services import OTHER_CART_FORBIDDEN
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

CART_VIEWS = ("CartFetchView", "CartByUserView")


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates inside the view; this runs earlier, so bearer tokens
    # are checked here by hand.
    meta = getattr(request, "META", {}) or {}
    auth_header = meta.get("HTTP_AUTHORIZATION") if hasattr(meta, "get") else None
    if not auth_header:
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "can_view_any_cart", False))


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id
    request.is_privileged_user = _is_privileged_user(getattr(request, "user", None))


def _raw_target_user_id(request: HttpRequest, view_name: str, view_kwargs) -> Optional[str]:
    if view_name == "CartByUserView":
        value = view_kwargs.get("user_id")
        return None if value is None else str(value)
    query = getattr(request, "GET", None) or {}
    return query.get("userId") or query.get("user_id")


def _validate_cart_fetch(request: HttpRequest, view_name: str, view_kwargs) -> Any:
    if not _is_authenticated_user(request):
        logger.warning("Cart fetch requires authentication", view=view_name)
        return error_response("UNAUTHORIZED", "Authentication required")

    actor_id = int(request.user.id)
    _set_validated_user(request, actor_id)
    is_privileged = request.is_privileged_user

    raw_user_id = _raw_target_user_id(request, view_name, view_kwargs)
    target_user_id = actor_id
    if raw_user_id is not None:
        try:
            target_user_id = int(raw_user_id)
        except (TypeError, ValueError):
            logger.warning(
                "Invalid userId provided for cart fetch",
                view=view_name,
                value=raw_user_id,
            )
            return error_response(
                "VALIDATION_ERROR",
                "userId must be an integer",
                {"userId": raw_user_id},
            )
        if target_user_id <= 0:
            return error_response(
                "VALIDATION_ERROR",
                "userId must be a positive integer",
                {"userId": raw_user_id},
            )
        if not is_privileged and target_user_id != actor_id:
            logger.warning(
                "Cart fetch forbidden for non-privileged override",
                actor_id=actor_id,
                target_user_id=target_user_id,
            )
            return error_response(
                "FORBIDDEN",
                str(OTHER_CART_FORBIDDEN),
                {"userId": raw_user_id},
            )

    request.cart_target_user_id = target_user_id
    logger.debug(
        "Validated cart fetch context",
        view=view_name,
        actor_id=actor_id,
        target_user_id=target_user_id,
        privileged=is_privileged,
    )
    return None


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Request level validation for API views.

    Returns an error Response when the request must not reach the view;
    otherwise returns None after attaching the validated values
    (``validated_user_id``, ``is_privileged_user``, ``cart_target_user_id``)
    to the request.
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", None)
    logger.debug("Running request context validation", view=view_name, method=method)

    if view_name in CART_VIEWS and method == "GET":
        return _validate_cart_fetch(request, view_name, view_kwargs or {})
    return None
