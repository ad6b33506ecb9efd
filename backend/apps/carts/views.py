from typing import Optional

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import status_for_code
from apps.common import get_logger
from .container import build_cart_service
from .dtos import CartResponseDTO
from .serializers import CartResponseSerializer

logger = get_logger(__name__).bind(component="carts", layer="view")

CART_RESPONSES = {
    200: CartResponseSerializer,
    400: OpenApiResponse(response=ErrorResponseSerializer),
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(
        response=CartResponseSerializer,
        description="Envelope with status 'failed' when the account cannot own a cart",
    ),
    404: OpenApiResponse(
        response=CartResponseSerializer,
        description="Envelope with status 'failed' when the user does not exist",
    ),
}


def envelope_failure(code: str, message: str) -> Response:
    """Failed cart fetches still answer with the cart payload shape."""
    payload = CartResponseSerializer(CartResponseDTO.failure(message)).data
    return Response(payload, status=status_for_code(code))


class BaseCartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger

    def _fetch(self, request, target_user_id: Optional[int]) -> Response:
        actor_id = getattr(request, "validated_user_id", None)
        is_privileged = bool(getattr(request, "is_privileged_user", False))
        self.log.debug(
            "Fetching cart via API",
            actor_id=actor_id,
            target_user_id=target_user_id,
            privileged=is_privileged,
        )
        dto, error = self.service.fetch_cart_with_access(
            actor_id=actor_id,
            target_user_id=target_user_id,
            is_privileged=is_privileged,
        )
        if error:
            code, message, details = error
            self.log.info(
                "Cart fetch answered with failure envelope",
                code=code,
                actor_id=actor_id,
                details=details,
            )
            return envelope_failure(code, str(message))
        return Response(CartResponseSerializer(dto).data)


class CartFetchView(BaseCartView):
    log = logger.bind(view="CartFetchView")

    @extend_schema(
        summary="Fetch cart",
        description=(
            "Returns the cart lines of the authenticated customer together with the cart total. "
            "Staff or superusers may pass userId to read another customer's cart."
        ),
        parameters=[
            OpenApiParameter(
                name="userId",
                description="Target customer; defaults to the caller",
                required=False,
                type=int,
                location=OpenApiParameter.QUERY,
            )
        ],
        responses=CART_RESPONSES,
    )
    def get(self, request):
        target_user_id = getattr(request, "cart_target_user_id", None)
        return self._fetch(request, target_user_id)


class CartByUserView(BaseCartView):
    log = logger.bind(view="CartByUserView")

    @extend_schema(
        summary="Fetch cart by user",
        parameters=[OpenApiParameter("user_id", int, OpenApiParameter.PATH)],
        responses=CART_RESPONSES,
    )
    def get(self, request, user_id: int):
        return self._fetch(request, int(user_id))
