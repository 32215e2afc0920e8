import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.errors import NotFoundError, StoreWriteError, ValidationError
from app.models.book import Book
from app.models.cart import CartItem
from app.models.listing import Listing, ListingStatus
from app.schemas.cart_schemas import CartItemView, CartView
from app.schemas.identity_schemas import Identity
from app.services.profile_service import ensure_profile
from app.utils.token import require_identity

logger = logging.getLogger(__name__)


def _item_view(item: CartItem, listing: Listing, book: Book) -> CartItemView:
    return CartItemView(
        item_id=item.id,
        listing_id=listing.id,
        book_title=book.title,
        author=book.author,
        image_url=listing.image_url,
        price=listing.price,
        quantity=item.quantity,
        available=listing.status == ListingStatus.available,
    )


def _load_item(session: Session, item_id: int):
    return session.exec(
        select(CartItem, Listing, Book)
        .join(Listing, CartItem.listing_id == Listing.id)
        .join(Book, Listing.book_id == Book.id)
        .where(CartItem.id == item_id)
    ).one()


def get_cart(*, session: Session, identity: Optional[Identity]) -> CartView:
    caller = require_identity(identity)

    rows = session.exec(
        select(CartItem, Listing, Book)
        .join(Listing, CartItem.listing_id == Listing.id)
        .join(Book, Listing.book_id == Book.id)
        .where(CartItem.buyer_id == caller.user_id)
        .order_by(CartItem.created_at, CartItem.id)
    ).all()

    items = [_item_view(item, listing, book) for item, listing, book in rows]

    # sold or removed listings stay visible but are not payable
    subtotal = sum(i.price * i.quantity for i in items if i.available)

    return CartView(items=items, subtotal=round(subtotal, 2))


def add_to_cart(*, session: Session, identity: Optional[Identity], listing_id: int) -> CartItemView:
    caller = require_identity(identity)

    listing = session.get(Listing, listing_id)
    if not listing:
        raise NotFoundError("Listing not found")

    if listing.status != ListingStatus.available:
        raise ValidationError("Listing is not available")

    if listing.seller_id == caller.user_id:
        raise ValidationError("You cannot buy your own listing")

    existing = session.exec(
        select(CartItem).where(
            CartItem.buyer_id == caller.user_id,
            CartItem.listing_id == listing_id,
        )
    ).first()

    if existing:
        return _item_view(*_load_item(session, existing.id))

    item = CartItem(buyer_id=caller.user_id, listing_id=listing_id, quantity=1)

    try:
        ensure_profile(session, caller)
        session.add(item)
        session.commit()
    except IntegrityError:
        # lost a race with a concurrent add of the same listing
        session.rollback()
        item = session.exec(
            select(CartItem).where(
                CartItem.buyer_id == caller.user_id,
                CartItem.listing_id == listing_id,
            )
        ).first()
        if item is None:
            raise StoreWriteError("Failed to add to cart")
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError("Failed to add to cart") from e

    logger.info(f"Listing {listing_id} added to cart of buyer {caller.user_id}")
    return _item_view(*_load_item(session, item.id))


def remove_cart_item(*, session: Session, identity: Optional[Identity], item_id: int) -> None:
    caller = require_identity(identity)

    item = session.get(CartItem, item_id)
    if not item or item.buyer_id != caller.user_id:
        raise NotFoundError("Cart item not found")

    try:
        session.delete(item)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError("Failed to remove cart item") from e
