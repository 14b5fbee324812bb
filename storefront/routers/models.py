"""
Cart API Pydantic Models

Request bodies for the cart endpoints. Quantities typed by the user arrive
raw and are sanitized in the router.
"""
from typing import Union

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    title: str
    price: Union[float, str]
    image: str = ""
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    id: str
    quantity: Union[int, str, None] = None  # 0 removes the line


class CartItemRequest(BaseModel):
    id: str
