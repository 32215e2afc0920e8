"""Checkout workflow: cart validation, hosted payment session, order materialization.

``begin_checkout`` prices the selected cart items from the store and opens a
payment session with the provider. ``finalize_checkout`` reads the paid
session back, turns every still-present cart item it names into a completed
Order, flips the listing to ``sold`` and clears those cart items, all in one
store transaction. Once the cart items are gone a repeat call finds nothing
to do, which keeps finalization idempotent for a given session.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.config import settings
from app.errors import (
    ListingUnavailableError,
    NotFoundError,
    PaymentNotCompletedError,
    StoreWriteError,
    ValidationError,
)
from app.models.book import Book
from app.models.cart import CartItem
from app.models.listing import Listing, ListingStatus
from app.models.order import Order, OrderStatus
from app.schemas.checkout_schemas import FinalizeResult, LineItem
from app.schemas.identity_schemas import Identity
from app.services.payment_service import PAID, PaymentProvider
from app.utils.token import require_identity

logger = logging.getLogger(__name__)

CHECKOUT_MODE = "payment"
MAX_CHECKOUT_ITEMS = 100


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def format_cart_item_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in ids)


def parse_cart_item_ids(raw: Optional[str]) -> List[int]:
    ids = []
    for part in (raw or "").split(","):
        part = part.strip()
        if part.isdigit():
            ids.append(int(part))
    return ids


def begin_checkout(
    *,
    session: Session,
    identity: Optional[Identity],
    cart_item_ids: List[int],
    provider: PaymentProvider,
) -> str:
    caller = require_identity(identity)

    ids = sorted(set(cart_item_ids or []))
    if not ids:
        raise ValidationError("No cart items selected")
    if len(ids) > MAX_CHECKOUT_ITEMS:
        raise ValidationError(f"At most {MAX_CHECKOUT_ITEMS} items can be bought at once")

    rows = session.exec(
        select(CartItem, Listing, Book)
        .join(Listing, CartItem.listing_id == Listing.id)
        .join(Book, Listing.book_id == Book.id)
        .where(CartItem.id.in_(ids), CartItem.buyer_id == caller.user_id)
        .order_by(CartItem.id)
    ).all()

    if not rows:
        raise NotFoundError("Cart items not found")

    for _, listing, _ in rows:
        if listing.status != ListingStatus.available:
            raise ValidationError(f"Listing {listing.id} is no longer available")

    # prices come from the listing rows, never from the request
    line_items = [
        LineItem(
            name=book.title,
            unit_amount=to_minor_units(listing.price),
            quantity=1,
            currency=settings.CURRENCY,
        )
        for _, listing, book in rows
    ]

    metadata = {
        "buyer_id": str(caller.user_id),
        "cart_item_ids": format_cart_item_ids(item.id for item, _, _ in rows),
    }

    checkout = provider.create_session(line_items, CHECKOUT_MODE, metadata)
    logger.info(
        f"Checkout session {checkout.handle} opened for buyer {caller.user_id} "
        f"({len(line_items)} items)"
    )
    return checkout.client_token


def finalize_checkout(
    *,
    session: Session,
    identity: Optional[Identity],
    payment_handle: str,
    provider: PaymentProvider,
) -> FinalizeResult:
    caller = require_identity(identity)

    if not payment_handle or not payment_handle.strip():
        raise ValidationError("payment_handle is required")

    payment = provider.retrieve_session(payment_handle.strip())

    if payment.payment_status != PAID:
        logger.warning(
            f"Finalize refused for {payment.handle}: status is {payment.payment_status}"
        )
        raise PaymentNotCompletedError("Payment not completed")

    if payment.metadata.get("buyer_id") != str(caller.user_id):
        raise NotFoundError("Checkout session not found")

    # the session metadata decides what was paid for
    cart_item_ids = parse_cart_item_ids(payment.metadata.get("cart_item_ids"))

    rows = []
    if cart_item_ids:
        rows = session.exec(
            select(CartItem, Listing)
            .join(Listing, CartItem.listing_id == Listing.id)
            .where(CartItem.id.in_(cart_item_ids), CartItem.buyer_id == caller.user_id)
            .order_by(CartItem.id)
        ).all()

    if not rows:
        logger.info(f"Nothing to finalize for {payment.handle}")
        return FinalizeResult(success=True, nothing_to_finalize=True)

    payment_id = payment.payment_reference or payment.handle
    now = datetime.utcnow()
    orders = []

    try:
        for item, listing in rows:
            marked = session.execute(
                update(Listing)
                .where(Listing.id == listing.id, Listing.status == ListingStatus.available)
                .values(status=ListingStatus.sold, updated_at=now)
            )
            if marked.rowcount != 1:
                raise ListingUnavailableError(listing.id)

            order = Order(
                buyer_id=caller.user_id,
                seller_id=listing.seller_id,
                listing_id=listing.id,
                total_amount=listing.price,
                status=OrderStatus.completed,
                payment_id=payment_id,
            )
            session.add(order)
            orders.append(order)

        session.flush()

        session.execute(
            delete(CartItem).where(CartItem.id.in_([item.id for item, _ in rows]))
        )
        session.commit()

    except ListingUnavailableError as e:
        session.rollback()
        logger.warning(f"Finalize aborted for {payment.handle}: {e}")
        raise

    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Finalize failed for {payment.handle}")
        raise StoreWriteError("Failed to record orders") from e

    order_ids = [order.id for order in orders]
    logger.info(
        f"Finalized {payment.handle}: {len(order_ids)} orders for buyer {caller.user_id}"
    )

    return FinalizeResult(success=True, orders_created=len(order_ids), order_ids=order_ids)
