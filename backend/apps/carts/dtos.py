from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from apps.api.envelope import ResponseEnvelope
from apps.catalog.dtos import ProductDTO

ZERO_AMOUNT = Decimal("0")


def as_amount(value: Any) -> Decimal:
    """Coerce a monetary value to Decimal. Decimals pass through untouched."""
    if value is None:
        return ZERO_AMOUNT
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed digits: 19.98 -> Decimal("19.98")
    return Decimal(str(value))


@dataclass
class CartDTO:
    id: int
    user_id: int
    product: ProductDTO
    quantity: int
    added_time: Optional[str]


@dataclass(frozen=True)
class CartResponseDTO:
    """
    Cart lines plus their total, as returned by a cart fetch.

    The value is built in one step by the cart service and never mutated
    afterwards; ``with_items`` and ``with_total_amount`` hand back copies.
    ``total_amount`` is carried as given: it is not recomputed from
    ``items`` and not rounded.
    """

    items: Sequence[Any] = field(default_factory=list)
    total_amount: Decimal = ZERO_AMOUNT
    envelope: ResponseEnvelope = field(default_factory=ResponseEnvelope)

    def __post_init__(self):
        object.__setattr__(
            self, "items", list(self.items) if self.items is not None else []
        )
        object.__setattr__(self, "total_amount", as_amount(self.total_amount))
        if self.envelope is None:
            object.__setattr__(self, "envelope", ResponseEnvelope())

    def with_items(self, items: Optional[Sequence[Any]]) -> "CartResponseDTO":
        return replace(self, items=items)

    def with_total_amount(self, amount: Any) -> "CartResponseDTO":
        return replace(self, total_amount=amount)

    def with_envelope(self, envelope: ResponseEnvelope) -> "CartResponseDTO":
        return replace(self, envelope=envelope)

    @classmethod
    def failure(cls, message: str) -> "CartResponseDTO":
        return cls(envelope=ResponseEnvelope.failure(message))

    @property
    def item_count(self) -> int:
        return len(self.items)
