from __future__ import annotations

from typing import Iterable, List, Protocol, TYPE_CHECKING

from .models import Cart

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO


class CartRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> Iterable[Cart]:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, line: Cart) -> "CartDTO":
        ...

    def many_to_dto(self, lines: Iterable[Cart]) -> List["CartDTO"]:
        ...
