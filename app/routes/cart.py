from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.schemas.cart_schemas import CartAddRequest, CartItemView, CartView
from app.schemas.identity_schemas import Identity
from app.services import cart_service
from app.utils.token import get_current_identity


router = APIRouter()

# View Cart

@router.get("", response_model=CartView)
def get_cart(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return cart_service.get_cart(session=session, identity=identity)


# Add to Cart

@router.post("/add", response_model=CartItemView)
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return cart_service.add_to_cart(session=session, identity=identity, listing_id=data.listing_id)


# Remove Cart

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    cart_service.remove_cart_item(session=session, identity=identity, item_id=item_id)
    return {"message": "Item removed from cart"}
