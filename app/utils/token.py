from jose import jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from app.config import settings
from app.errors import UnauthenticatedError
from app.schemas.identity_schemas import Identity

# tokens are issued by the identity provider, this service only verifies them
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = datetime.utcnow() + (
        expires_delta
        if expires_delta
        else timedelta(minutes=settings.access_token_expire_minutes)
    )

    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.algorithm
    )
    return encoded_jwt


def decode_access_token(token: str):
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return payload
    except jwt.JWTError:
        return None


def identity_from_token(token: Optional[str]) -> Optional[Identity]:
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = payload.get("user_id") or payload.get("sub")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        return None

    return Identity(user_id=user_id, email=payload.get("email"))


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """Caller identity for this request, or None when the token is absent or invalid."""
    if credentials is None:
        return None
    return identity_from_token(credentials.credentials)


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthenticatedError("Could not validate credentials")
    return identity
