# storefront/routes/catalog.py

from typing import List

from fastapi import APIRouter, status
from pydantic import BaseModel

from storefront.catalog import get_product, list_products
from storefront.exceptions import StorefrontError
from storefront.schemas.product import Product

router = APIRouter()


class ProductsResponse(BaseModel):
    data: List[Product]


class ProductNotFound(StorefrontError):
    status_code = 404


@router.get(
    "",
    response_model=ProductsResponse,
    status_code=status.HTTP_200_OK,
    summary="Каталог товаров",
)
async def read_products():
    return {"data": list_products()}


@router.get(
    "/{product_id}",
    response_model=Product,
    status_code=status.HTTP_200_OK,
    summary="Товар по ID",
    responses={404: {"description": "Товар не найден"}},
)
async def read_product(product_id: str):
    product = get_product(product_id)
    if product is None:
        raise ProductNotFound("Product not found")
    return product
