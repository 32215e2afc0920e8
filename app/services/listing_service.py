import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.errors import NotFoundError, StoreWriteError, ValidationError
from app.models.book import Book
from app.models.listing import Listing, ListingStatus
from app.models.profile import Profile
from app.schemas.book_schemas import BookView, ListingCreate, ListingPage, ListingView
from app.schemas.identity_schemas import Identity
from app.services.profile_service import ensure_profile, profiles_by_id, to_summary
from app.utils.pagination import paginate
from app.utils.token import require_identity

logger = logging.getLogger(__name__)


def to_listing_view(listing: Listing, book: Book, seller: Optional[Profile] = None) -> ListingView:
    return ListingView(
        id=listing.id,
        price=listing.price,
        image_url=listing.image_url,
        status=listing.status,
        created_at=listing.created_at,
        seller_id=listing.seller_id,
        book=BookView(
            id=book.id,
            title=book.title,
            author=book.author,
            description=book.description,
            condition=book.condition,
        ),
        seller=to_summary(seller),
    )


def browse_listings(
    *,
    session: Session,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
) -> ListingPage:
    query = (
        select(Listing, Book)
        .join(Book, Listing.book_id == Book.id)
        .where(Listing.status == ListingStatus.available)
    )

    if search:
        like = f"%{search.strip()}%"
        query = query.where(or_(Book.title.ilike(like), Book.author.ilike(like)))

    query = query.order_by(Listing.created_at.desc(), Listing.id.desc())

    data = paginate(session=session, query=query, page=page, limit=limit)

    sellers = profiles_by_id(session, (listing.seller_id for listing, _ in data["results"]))
    data["results"] = [
        to_listing_view(listing, book, sellers.get(listing.seller_id))
        for listing, book in data["results"]
    ]

    return ListingPage(**data)


def get_listing(*, session: Session, listing_id: int) -> ListingView:
    row = session.exec(
        select(Listing, Book)
        .join(Book, Listing.book_id == Book.id)
        .where(Listing.id == listing_id)
    ).first()

    if not row or row[0].status == ListingStatus.removed:
        raise NotFoundError("Listing not found")

    listing, book = row
    return to_listing_view(listing, book, session.get(Profile, listing.seller_id))


def create_listing(
    *, session: Session, identity: Optional[Identity], data: ListingCreate
) -> ListingView:
    caller = require_identity(identity)

    try:
        seller = ensure_profile(session, caller)

        book = Book(
            title=data.title,
            author=data.author,
            description=data.description,
            isbn=data.isbn,
            category=data.category,
            condition=data.condition,
        )
        session.add(book)
        session.flush()

        listing = Listing(
            seller_id=caller.user_id,
            book_id=book.id,
            price=data.price,
            image_url=data.image_url,
        )
        session.add(listing)
        session.commit()
        session.refresh(listing)
        session.refresh(book)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Failed to create listing for seller {caller.user_id}")
        raise StoreWriteError("Failed to create listing") from e

    logger.info(f"Listing {listing.id} created by seller {caller.user_id}")
    return to_listing_view(listing, book, seller)


def seller_listings(*, session: Session, identity: Optional[Identity]) -> List[ListingView]:
    caller = require_identity(identity)

    rows = session.exec(
        select(Listing, Book)
        .join(Book, Listing.book_id == Book.id)
        .where(Listing.seller_id == caller.user_id)
        .order_by(Listing.created_at.desc(), Listing.id.desc())
    ).all()

    seller = session.get(Profile, caller.user_id)
    return [to_listing_view(listing, book, seller) for listing, book in rows]


def remove_listing(*, session: Session, identity: Optional[Identity], listing_id: int) -> None:
    caller = require_identity(identity)

    listing = session.get(Listing, listing_id)
    if not listing or listing.seller_id != caller.user_id:
        raise NotFoundError("Listing not found")

    if listing.status == ListingStatus.sold:
        raise ValidationError("Sold listings cannot be removed")

    listing.status = ListingStatus.removed
    listing.updated_at = datetime.utcnow()

    try:
        session.add(listing)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError("Failed to remove listing") from e

    logger.info(f"Listing {listing_id} removed by seller {caller.user_id}")
