# storefront/schemas/product.py

from pydantic import BaseModel
from typing import List

class Product(BaseModel):
    id: str
    name: str
    shortName: str
    price: float
    description: str
    benefits: List[str] = []
    ingredients: List[str] = []
    imageUrl: str
    size: str
