from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.config import settings
from app.database import get_session
from app.schemas.checkout_schemas import (
    CheckoutCompleteRequest,
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    FinalizeResult,
)
from app.schemas.identity_schemas import Identity
from app.services.checkout_service import begin_checkout, finalize_checkout
from app.services.payment_service import PaymentProvider, get_payment_provider
from app.utils.token import get_current_identity

router = APIRouter()


# Checkout button - opens the hosted payment for the selected cart items

@router.post("/session", response_model=CheckoutSessionResponse)
def create_checkout_session(
    data: CheckoutSessionRequest,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    client_token = begin_checkout(
        session=session,
        identity=identity,
        cart_item_ids=data.cart_item_ids,
        provider=provider,
    )
    return CheckoutSessionResponse(
        client_token=client_token,
        key_id=settings.RAZORPAY_KEY_ID,
    )


# Called by the client once the hosted payment reports completion

@router.post("/complete", response_model=FinalizeResult)
def complete_checkout(
    data: CheckoutCompleteRequest,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    return finalize_checkout(
        session=session,
        identity=identity,
        payment_handle=data.payment_handle,
        provider=provider,
    )
