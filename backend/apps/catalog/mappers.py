"""Product model to DTO mapping."""
from typing import Iterable, List

from .dtos import ProductDTO
from .models import Product


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        seller = getattr(product, "seller", None)
        seller_name = None
        if seller is not None:
            seller_name = getattr(seller, "display_name", None) or getattr(
                seller, "username", None
            )
        return ProductDTO(
            id=product.id,
            title=product.title,
            description=product.description,
            price=str(product.price),
            quantity=product.quantity,
            image=product.image,
            seller_id=getattr(product, "seller_id", None),
            seller_name=seller_name,
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
