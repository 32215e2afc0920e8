from datetime import datetime

from app.models import Book, CartItem, Listing, ListingStatus, Message, Profile
from app.schemas.checkout_schemas import CheckoutSession, PaymentSession
from app.schemas.identity_schemas import Identity
from app.utils.token import create_access_token


class FakePaymentProvider:
    """In-memory stand-in for the hosted checkout."""

    def __init__(self):
        self.sessions = {}
        self.created = []

    def create_session(self, line_items, mode, metadata):
        handle = f"order_{len(self.created) + 1}"
        self.created.append(
            {"handle": handle, "line_items": list(line_items), "mode": mode, "metadata": dict(metadata)}
        )
        self.sessions[handle] = PaymentSession(
            handle=handle,
            payment_status="created",
            metadata=dict(metadata),
        )
        return CheckoutSession(handle=handle, client_token=handle)

    def retrieve_session(self, handle):
        return self.sessions[handle]

    def mark_paid(self, handle, reference="pay_1"):
        self.sessions[handle] = self.sessions[handle].model_copy(
            update={"payment_status": "paid", "payment_reference": reference}
        )


def identity(user_id):
    return Identity(user_id=user_id)


def auth_headers(user_id):
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


def make_profile(session, user_id, full_name=None):
    profile = Profile(id=user_id, full_name=full_name or f"User {user_id}")
    session.add(profile)
    session.commit()
    return profile


def make_listing(session, seller_id, price, title="Dune", status=ListingStatus.available):
    book = Book(title=title, author="Frank Herbert")
    session.add(book)
    session.commit()
    listing = Listing(seller_id=seller_id, book_id=book.id, price=price, status=status)
    session.add(listing)
    session.commit()
    session.refresh(listing)
    return listing


def add_to_cart(session, buyer_id, listing):
    item = CartItem(buyer_id=buyer_id, listing_id=listing.id)
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def make_message(session, sender_id, receiver_id, content, created_at=None, read=False):
    message = Message(
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        read=read,
        created_at=created_at or datetime.utcnow(),
    )
    session.add(message)
    session.commit()
    session.refresh(message)
    return message
