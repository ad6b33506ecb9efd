from __future__ import annotations

from apps.catalog.mappers import ProductMapper
from apps.users.repositories import UserRepository

from .mappers import CartMapper
from .repositories import CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        carts=CartRepository(),
        users=UserRepository(),
        cart_mapper=CartMapper(ProductMapper()),
    )
