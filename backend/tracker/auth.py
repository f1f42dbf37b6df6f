"""Token issuing/verification and the FastAPI security dependency.

Tokens are HS256 JWTs carrying a `userId` claim and expire after
`JWT_EXPIRE_DAYS` (14 by default). `get_current_user_id` re-verifies the
bearer token on every request, checks that the user it names still
exists, and returns that owner id; no session state is kept between
requests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from . import models, repositories
from .config import settings
from .database import get_session
from .errors import AuthenticationFailed

# auto_error=False so a missing header is reported as 401, not 403
bearer_scheme = HTTPBearer(auto_error=False)


def issue_token(user_id: int, now: Optional[datetime] = None) -> str:
    """Return a signed token proving the identity of `user_id`."""
    issued = now or datetime.now(timezone.utc)
    expire = issued + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload = {"userId": user_id, "iat": int(issued.timestamp()), "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> int:
    """Decode `token` and return its user id.

    Raises `AuthenticationFailed` when the token is expired, badly signed,
    malformed, or lacks an integer `userId` claim.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationFailed("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationFailed("Invalid token")
    user_id = payload.get("userId")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not models.is_storable_id(user_id):
        raise AuthenticationFailed("Invalid token")
    return user_id


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
) -> int:
    """FastAPI dependency that returns the authenticated owner id.

    Raises HTTPException(401) when the bearer token is missing, fails
    verification, or names a user that does not exist.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Missing token")
    try:
        user_id = verify_token(credentials.credentials)
    except AuthenticationFailed as e:
        raise HTTPException(status_code=401, detail=e.message)
    if repositories.UserRepository(db).get(user_id) is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user_id
