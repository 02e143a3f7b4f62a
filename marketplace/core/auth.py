"""
Bearer-token authentication.

Tokens are issued by ``POST /auth/login`` and signed with ``JWT_SECRET``.
When ``AUTH_JWKS_URL`` is configured, tokens from that external identity
provider are accepted instead, verified with the provider's public keys.
Either way the payload must carry ``sub`` (user id) and ``role``.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import requests
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from marketplace.core.config import settings
from marketplace.core.errors import AppError, UnauthorizedError

TENANT = "TENANT"
OWNER = "OWNER"

# auto_error=False so a missing header becomes our 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """Caller identity extracted from the JWT."""
    def __init__(self, user_id: str, email: Optional[str], role: str):
        self.id = user_id
        self.email = email
        self.role = role


# Cache for JWKS keys (to avoid fetching on every request)
_jwks_cache = None


def get_jwks():
    """
    Fetch the identity provider's JSON Web Key Set.

    Returns:
        dict: JWKS containing public keys for token verification
    """
    global _jwks_cache

    if _jwks_cache is not None:
        return _jwks_cache

    try:
        response = requests.get(settings.AUTH_JWKS_URL, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        return _jwks_cache
    except requests.RequestException as e:
        raise AppError(f"Failed to fetch JWKS: {e}")


def create_access_token(user) -> str:
    """Sign a token for a registered user (anything with id, email and role)."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict:
    """
    Verify a bearer token and return its decoded payload.

    Raises:
        UnauthorizedError: If token is invalid or expired
    """
    try:
        if settings.AUTH_JWKS_URL:
            return jwt.decode(
                token,
                get_jwks(),
                algorithms=["ES256", "RS256"],
                audience=settings.AUTH_AUDIENCE,
                options={"verify_aud": settings.AUTH_AUDIENCE is not None},
            )
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid authentication credentials")


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency resolving the caller from the Authorization header.

    Usage in route:
        @router.get("/protected")
        def protected_route(current_user: CurrentUser = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    if credentials is None:
        raise UnauthorizedError("Unauthorized")

    payload = verify_token(credentials.credentials)

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in (TENANT, OWNER):
        raise UnauthorizedError("Could not validate user")

    return CurrentUser(user_id=user_id, email=payload.get("email"), role=role)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/tenant/rented-properties")
        def rent(current_user: CurrentUser = Depends(require_role(TENANT))):
            ...
    """
    def role_checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role != required_role:
            raise UnauthorizedError(f"Unauthorized. Required role: {required_role}")
        return current_user
    return role_checker
