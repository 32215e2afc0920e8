from typing import Optional
from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.models.profile import Profile
from app.schemas.identity_schemas import Identity, ProfileSummary, ProfileUpdate
from app.services import profile_service
from app.utils.token import get_current_identity

router = APIRouter()


@router.get("/me", response_model=Profile)
def my_profile(
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return profile_service.get_my_profile(session=session, identity=identity)


@router.put("/me", response_model=Profile)
def update_my_profile(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    identity: Optional[Identity] = Depends(get_current_identity),
):
    return profile_service.update_profile(session=session, identity=identity, data=data)


@router.get("/{profile_id}", response_model=ProfileSummary)
def profile_detail(profile_id: int, session: Session = Depends(get_session)):
    return profile_service.to_summary(profile_service.get_profile(session, profile_id))
