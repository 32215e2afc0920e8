from typing import List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.book import Book
from app.models.listing import Listing
from app.models.order import Order, OrderStatus
from app.schemas.identity_schemas import Identity
from app.schemas.orders_schemas import BuyerStats, OrderView
from app.services.profile_service import profiles_by_id, to_summary
from app.utils.token import require_identity


def _orders_for(session: Session, column, user_id: int, counterpart_column: str) -> List[OrderView]:
    rows = session.exec(
        select(Order, Listing, Book)
        .join(Listing, Order.listing_id == Listing.id)
        .join(Book, Listing.book_id == Book.id)
        .where(column == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()

    profiles = profiles_by_id(session, (getattr(o, counterpart_column) for o, _, _ in rows))

    return [
        OrderView(
            id=order.id,
            listing_id=order.listing_id,
            book_title=book.title,
            image_url=listing.image_url,
            total_amount=order.total_amount,
            status=order.status,
            payment_id=order.payment_id,
            created_at=order.created_at,
            counterpart=to_summary(profiles.get(getattr(order, counterpart_column))),
        )
        for order, listing, book in rows
    ]


def buyer_orders(*, session: Session, identity: Optional[Identity]) -> List[OrderView]:
    """Purchases, newest first, with the seller as counterpart."""
    caller = require_identity(identity)
    return _orders_for(session, Order.buyer_id, caller.user_id, "seller_id")


def seller_orders(*, session: Session, identity: Optional[Identity]) -> List[OrderView]:
    """Sales, newest first, with the buyer as counterpart."""
    caller = require_identity(identity)
    return _orders_for(session, Order.seller_id, caller.user_id, "buyer_id")


def buyer_stats(*, session: Session, identity: Optional[Identity]) -> BuyerStats:
    caller = require_identity(identity)

    total_orders, total_spent = session.exec(
        select(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0))
        .where(Order.buyer_id == caller.user_id)
    ).one()

    pending = session.exec(
        select(func.count(Order.id)).where(
            Order.buyer_id == caller.user_id,
            Order.status == OrderStatus.pending,
        )
    ).one()

    return BuyerStats(
        total_orders=total_orders,
        total_spent=round(float(total_spent), 2),
        pending_orders=pending,
    )
