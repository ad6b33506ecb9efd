"""Cart model to DTO mapping. Totals are the service's business, not the mapper's."""
from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductMapper

from .dtos import CartDTO
from .models import Cart


class CartMapper:
    def __init__(self, product_mapper: Optional[ProductMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductMapper()

    def to_dto(self, line: Cart) -> CartDTO:
        added_time = getattr(line, "added_time", None)
        return CartDTO(
            id=line.id,
            user_id=line.user_id,
            product=self.product_mapper.to_dto(line.product),
            quantity=line.quantity,
            added_time=added_time.isoformat() if added_time is not None else None,
        )

    def many_to_dto(self, lines: Iterable[Cart]) -> List[CartDTO]:
        return [self.to_dto(line) for line in lines]
