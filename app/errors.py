"""Error taxonomy shared by the marketplace services.

Services raise these; ``app.main`` maps them to JSON responses using
``status_code``.
"""

from fastapi import status


class MarketplaceError(Exception):
    """Base class for request-scoped marketplace failures."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__ or "Request failed"
        super().__init__(self.message)


class UnauthenticatedError(MarketplaceError):
    """No caller identity."""
    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationError(MarketplaceError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(MarketplaceError):
    """Referenced rows don't exist or aren't owned by the caller."""
    status_code = status.HTTP_404_NOT_FOUND


class PaymentNotCompletedError(MarketplaceError):
    """Payment not completed."""
    status_code = status.HTTP_402_PAYMENT_REQUIRED


class PaymentProviderError(MarketplaceError):
    """Payment provider call failed."""
    status_code = status.HTTP_502_BAD_GATEWAY


class StoreWriteError(MarketplaceError):
    """Store insert, update or delete failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ListingUnavailableError(StoreWriteError):
    """Listing is no longer available."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, listing_id: int):
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} is no longer available")
