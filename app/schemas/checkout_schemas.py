# app/schemas/checkout_schemas.py
from pydantic import BaseModel
from typing import Dict, List, Optional


class LineItem(BaseModel):
    name: str
    unit_amount: int      # smallest currency unit (paise)
    quantity: int = 1
    currency: str = "INR"


class CheckoutSession(BaseModel):
    handle: str
    client_token: str


class PaymentSession(BaseModel):
    handle: str
    payment_status: str
    payment_reference: Optional[str] = None
    metadata: Dict[str, str] = {}


class CheckoutSessionRequest(BaseModel):
    cart_item_ids: List[int] = []


class CheckoutSessionResponse(BaseModel):
    client_token: str
    key_id: str


class CheckoutCompleteRequest(BaseModel):
    payment_handle: str


class FinalizeResult(BaseModel):
    success: bool
    orders_created: int = 0
    order_ids: List[int] = []
    nothing_to_finalize: bool = False
