from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session
from app.database import get_session
from app.schemas.book_schemas import ListingCreate, ListingPage, ListingView
from app.schemas.identity_schemas import Identity
from app.services import listing_service
from app.utils.token import get_current_identity

router = APIRouter()


@router.get("", response_model=ListingPage)
def browse(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    session: Session = Depends(get_session),
):
    return listing_service.browse_listings(
        session=session, search=search, page=page, limit=limit
    )


@router.get("/mine", response_model=List[ListingView])
def my_listings(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return listing_service.seller_listings(session=session, identity=identity)


@router.get("/{listing_id}", response_model=ListingView)
def listing_detail(listing_id: int, session: Session = Depends(get_session)):
    return listing_service.get_listing(session=session, listing_id=listing_id)


@router.post("", response_model=ListingView, status_code=201)
def sell_book(
    data: ListingCreate,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return listing_service.create_listing(session=session, identity=identity, data=data)


@router.delete("/{listing_id}")
def remove(
    listing_id: int,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    listing_service.remove_listing(session=session, identity=identity, listing_id=listing_id)
    return {"message": "Listing removed"}
