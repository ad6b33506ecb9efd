from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from django.utils.translation import gettext as _, gettext_lazy

from apps.api.envelope import ResponseEnvelope
from apps.common import get_logger
from apps.users.protocols import UserRepositoryProtocol
from .dtos import ZERO_AMOUNT, CartResponseDTO, as_amount
from .protocols import CartMapperProtocol, CartRepositoryProtocol

logger = get_logger(__name__).bind(component="carts", layer="service")

OTHER_CART_FORBIDDEN = gettext_lazy("You do not have permission to view this user's cart")

ServiceError = Tuple[str, str, Optional[Dict[str, Any]]]


class CartUserNotFoundError(Exception):
    """Raised when the cart owner does not exist."""


class CartNotAllowedError(Exception):
    """Raised when the account is not a customer and therefore has no cart."""


class CartService:
    def __init__(
        self,
        carts: CartRepositoryProtocol,
        users: UserRepositoryProtocol,
        cart_mapper: CartMapperProtocol,
    ):
        self.carts = carts
        self.users = users
        self.cart_mapper = cart_mapper
        self.logger = logger.bind(service="CartService")

    @staticmethod
    def calculate_total(lines: Iterable[Any]) -> Decimal:
        """Sum of price x quantity over cart lines, exact, no rounding."""
        total = ZERO_AMOUNT
        for line in lines:
            total += as_amount(line.product.price) * int(line.quantity)
        return total

    def fetch_user_cart(self, user_id: int) -> CartResponseDTO:
        """
        Read every cart line of ``user_id`` and return them with their total.

        Raises CartUserNotFoundError when the user does not exist and
        CartNotAllowedError when the account cannot own a cart.
        """
        self.logger.debug("Fetching cart", user_id=user_id)
        user = self.users.get(id=user_id)
        if user is None:
            self.logger.info("Cart fetch failed: user missing", user_id=user_id)
            raise CartUserNotFoundError(f"User {user_id} does not exist")
        if not user.can_own_cart:
            self.logger.warning(
                "Cart fetch rejected for non-customer account",
                user_id=user_id,
                role=getattr(user, "role", None),
            )
            raise CartNotAllowedError("Only customer accounts can own carts")

        lines = list(self.carts.list_for_user(user_id))
        total = self.calculate_total(lines)
        response = CartResponseDTO(
            items=self.cart_mapper.many_to_dto(lines),
            total_amount=total,
            envelope=ResponseEnvelope.success(_("Cart fetched successfully")),
        )
        self.logger.info(
            "Cart fetched",
            user_id=user_id,
            item_count=response.item_count,
            total=total,
        )
        return response

    def fetch_cart_with_access(
        self,
        *,
        actor_id: Optional[int],
        target_user_id: Optional[int],
        is_privileged: bool,
    ) -> Tuple[Optional[CartResponseDTO], Optional[ServiceError]]:
        self.logger.debug(
            "Resolving cart access",
            actor_id=actor_id,
            target_user_id=target_user_id,
            privileged=is_privileged,
        )
        if actor_id is None:
            self.logger.warning(
                "Cart fetch unauthorized", target_user_id=target_user_id
            )
            return None, ("UNAUTHORIZED", _("Authentication required"), None)
        effective_target = actor_id if target_user_id is None else int(target_user_id)
        # Also enforced by RequestValidationMiddleware before HTTP requests get here.
        if not is_privileged and effective_target != actor_id:
            self.logger.warning(
                "Cart fetch forbidden",
                actor_id=actor_id,
                target_user_id=effective_target,
            )
            return None, (
                "FORBIDDEN",
                str(OTHER_CART_FORBIDDEN),
                {"userId": str(effective_target)},
            )
        try:
            return self.fetch_user_cart(effective_target), None
        except CartUserNotFoundError:
            return None, (
                "NOT_FOUND",
                _("User not found"),
                {"userId": str(effective_target)},
            )
        except CartNotAllowedError:
            return None, (
                "FORBIDDEN",
                _("Only customer accounts can own carts"),
                {"userId": str(effective_target)},
            )
