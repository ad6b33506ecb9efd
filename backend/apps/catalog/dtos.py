from dataclasses import dataclass
from typing import Optional


@dataclass
class ProductDTO:
    id: int
    title: str
    description: str
    price: str
    quantity: int
    image: str
    seller_id: Optional[int]
    seller_name: Optional[str]
