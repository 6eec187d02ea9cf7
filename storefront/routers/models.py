"""
Cart API Pydantic Models
"""
from typing import Optional
from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    """A line already resolved to a variant by the product page."""
    id: Optional[str] = None  # defaults to product_id-size-color
    product_id: str = Field(..., min_length=1)
    name: str
    price: float = Field(..., ge=0, allow_inf_nan=False)
    image: str = ""
    size: str
    color: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int  # below 1 removes the line
