from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.errors import NotFoundError, StoreWriteError
from app.models.profile import Profile
from app.schemas.identity_schemas import Identity, ProfileSummary, ProfileUpdate
from app.utils.token import require_identity


def to_summary(profile: Optional[Profile]) -> Optional[ProfileSummary]:
    if profile is None:
        return None
    return ProfileSummary(
        id=profile.id,
        full_name=profile.full_name,
        avatar_url=profile.avatar_url,
    )


def profiles_by_id(session: Session, ids: Iterable[int]) -> Dict[int, Profile]:
    """Batched lookup; ids without a profile are simply absent from the result."""
    ids = list(set(ids))
    if not ids:
        return {}
    rows = session.exec(select(Profile).where(Profile.id.in_(ids))).all()
    return {p.id: p for p in rows}


def ensure_profile(session: Session, identity: Identity) -> Profile:
    # identity provider accounts may exist before their profile row does
    profile = session.get(Profile, identity.user_id)
    if profile is None:
        profile = Profile(id=identity.user_id, email=identity.email)
        session.add(profile)
        session.flush()
    return profile


def get_profile(session: Session, profile_id: int) -> Profile:
    profile = session.get(Profile, profile_id)
    if not profile:
        raise NotFoundError("Profile not found")
    return profile


def get_my_profile(*, session: Session, identity: Optional[Identity]) -> Profile:
    caller = require_identity(identity)

    try:
        profile = ensure_profile(session, caller)
        session.commit()
        session.refresh(profile)
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError("Failed to load profile") from e

    return profile


def update_profile(
    *, session: Session, identity: Optional[Identity], data: ProfileUpdate
) -> Profile:
    caller = require_identity(identity)

    try:
        profile = ensure_profile(session, caller)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)
        profile.updated_at = datetime.utcnow()

        session.add(profile)
        session.commit()
        session.refresh(profile)
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError("Failed to update profile") from e

    return profile
