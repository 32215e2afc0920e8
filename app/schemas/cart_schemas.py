from pydantic import BaseModel
from typing import List, Optional

class CartAddRequest(BaseModel):
    listing_id: int

class CartItemView(BaseModel):
    item_id: int
    listing_id: int
    book_title: str
    author: str
    image_url: Optional[str] = None
    price: float
    quantity: int
    available: bool

class CartView(BaseModel):
    items: List[CartItemView]
    subtotal: float
