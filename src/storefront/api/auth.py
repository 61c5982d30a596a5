"""Bearer-token authentication.

Tokens are HS256 JWTs carrying ``sub`` (the customer id) and ``is_admin``.
Sign-in lives elsewhere; this module only issues tokens for trusted callers
and turns a presented token into an Identity.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.config import get_settings
from storefront.errors import AccessDenied, Unauthenticated

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    user_id: str
    is_admin: bool = False


def issue_token(user_id: str, is_admin: bool = False, expires_in: timedelta = timedelta(days=7)) -> str:
    settings = get_settings()
    payload = {
        "sub": str(user_id),
        "is_admin": bool(is_admin),
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Identity:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise Unauthenticated("token_expired", "Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise Unauthenticated("token_invalid", "Invalid token") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("token_invalid", "Invalid token payload")
    return Identity(user_id=str(user_id), is_admin=bool(payload.get("is_admin", False)))


async def optional_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> Identity | None:
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


async def current_identity(identity: Identity | None = Depends(optional_identity)) -> Identity:
    if identity is None:
        raise Unauthenticated("token_missing", "Authentication required")
    return identity


async def require_admin(identity: Identity = Depends(current_identity)) -> Identity:
    if not identity.is_admin:
        raise AccessDenied("admin_required", "Admin access required")
    return identity
