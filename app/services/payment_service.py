import logging
from functools import lru_cache
from typing import Dict, List, Protocol

import razorpay
import requests

from app.config import settings
from app.errors import PaymentProviderError
from app.schemas.checkout_schemas import CheckoutSession, LineItem, PaymentSession

logger = logging.getLogger(__name__)

PAID = "paid"

# razorpay caps notes at 15 keys of 256 chars each
MAX_NOTE_LENGTH = 256
MAX_NOTES = 15


def to_notes(metadata: Dict[str, str]) -> Dict[str, str]:
    """Split long values over ``key``, ``key.1``, ``key.2``... notes."""
    notes = {}
    for key, value in metadata.items():
        value = str(value)
        chunks = [
            value[i:i + MAX_NOTE_LENGTH] for i in range(0, len(value), MAX_NOTE_LENGTH)
        ] or [""]
        for n, chunk in enumerate(chunks):
            notes[key if n == 0 else f"{key}.{n}"] = chunk

    if len(notes) > MAX_NOTES:
        raise PaymentProviderError("Checkout metadata is too large for the provider")
    return notes


def from_notes(notes: Dict[str, str]) -> Dict[str, str]:
    parts: Dict[str, Dict[int, str]] = {}
    for key, value in notes.items():
        base, sep, index = key.rpartition(".")
        if sep and index.isdigit():
            parts.setdefault(base, {})[int(index)] = str(value)
        else:
            parts.setdefault(key, {})[0] = str(value)

    return {
        key: "".join(chunks[n] for n in sorted(chunks))
        for key, chunks in parts.items()
    }


class PaymentProvider(Protocol):
    def create_session(
        self, line_items: List[LineItem], mode: str, metadata: Dict[str, str]
    ) -> CheckoutSession: ...

    def retrieve_session(self, handle: str) -> PaymentSession: ...


class RazorpayCheckout:
    """Hosted checkout backed by the Razorpay Orders API.

    A Razorpay order plays the role of the payment session: its id is both the
    handle kept by the server and the token the browser widget opens. Metadata
    travels in the order ``notes`` and comes back unchanged on fetch.
    """

    def __init__(self, client=None):
        self.client = client or razorpay.Client(
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET)
        )

    def create_session(
        self, line_items: List[LineItem], mode: str, metadata: Dict[str, str]
    ) -> CheckoutSession:
        if mode != "payment":
            raise PaymentProviderError(f"Unsupported checkout mode: {mode}")
        if not line_items:
            raise PaymentProviderError("Cannot create a session without line items")

        currencies = {item.currency for item in line_items}
        if len(currencies) != 1:
            raise PaymentProviderError("Line items must share one currency")

        notes = to_notes(metadata)
        amount = sum(item.unit_amount * item.quantity for item in line_items)

        order = self._call(
            self.client.order.create,
            {
                "amount": amount,
                "currency": currencies.pop(),
                # capture on authorization, the widget stays on the page
                "payment_capture": 1,
                "notes": notes,
            },
        )
        logger.info(f"Razorpay order {order['id']} created for {amount} ({len(line_items)} items)")

        return CheckoutSession(handle=order["id"], client_token=order["id"])

    def retrieve_session(self, handle: str) -> PaymentSession:
        order = self._call(self.client.order.fetch, handle)

        payment_reference = None
        if order.get("status") == PAID:
            payments = self._call(self.client.order.payments, handle)
            captured = [p for p in payments.get("items", []) if p.get("status") == "captured"]
            if captured:
                payment_reference = captured[0]["id"]

        notes = order.get("notes") or {}
        # razorpay returns an empty list instead of an empty dict
        if not isinstance(notes, dict):
            notes = {}

        return PaymentSession(
            handle=order["id"],
            payment_status=order.get("status", "created"),
            payment_reference=payment_reference,
            metadata=from_notes(notes),
        )

    @staticmethod
    def _call(fn, *args):
        try:
            return fn(*args)
        except (
            razorpay.errors.BadRequestError,
            razorpay.errors.GatewayError,
            razorpay.errors.ServerError,
            requests.RequestException,
        ) as e:
            logger.error(f"Razorpay call {getattr(fn, '__name__', fn)} failed: {e}")
            raise PaymentProviderError(str(e) or "Payment provider request failed") from e


@lru_cache(maxsize=1)
def get_payment_provider() -> PaymentProvider:
    return RazorpayCheckout()
