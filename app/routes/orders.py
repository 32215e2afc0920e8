from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.schemas.identity_schemas import Identity
from app.schemas.orders_schemas import BuyerStats, OrderView
from app.services import order_service
from app.utils.token import get_current_identity

router = APIRouter()


@router.get("", response_model=List[OrderView])
def my_orders(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return order_service.buyer_orders(session=session, identity=identity)


@router.get("/sales", response_model=List[OrderView])
def my_sales(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return order_service.seller_orders(session=session, identity=identity)


@router.get("/stats", response_model=BuyerStats)
def my_stats(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return order_service.buyer_stats(session=session, identity=identity)
