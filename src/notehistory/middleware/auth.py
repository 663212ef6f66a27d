"""Authentication middleware."""

from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status, Depends, Request
from fastapi.security import APIKeyCookie, HTTPBearer, HTTPAuthorizationCredentials

from ..config import get_settings
from ..security import get_user_id_from_token


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication."""

    def __init__(self, auto_error: bool = True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request: Request) -> UUID:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise _unauthorized("Not authenticated")

        if credentials.scheme.lower() != "bearer":
            raise _unauthorized("Invalid authentication scheme")

        user_id = get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise _unauthorized("Invalid token or expired token")

        return user_id


class CookieOrBearerAuth:
    """JWT from the auth cookie, falling back to the Authorization header.

    ``navigator.sendBeacon`` cannot set headers, only cookies travel with it.
    """

    def __init__(self, cookie_name: Optional[str] = None):
        self.cookie = APIKeyCookie(
            name=cookie_name or get_settings().auth_cookie_name, auto_error=False
        )
        self.bearer = HTTPBearer(auto_error=False)

    async def __call__(self, request: Request) -> UUID:
        token = await self.cookie(request)
        if not token:
            credentials = await self.bearer(request)
            if credentials and credentials.scheme.lower() == "bearer":
                token = credentials.credentials

        if not token:
            raise _unauthorized("Not authenticated")

        user_id = get_user_id_from_token(token)
        if not user_id:
            raise _unauthorized("Invalid token or expired token")

        return user_id


# Dependency for getting current user ID from JWT
async def get_current_user_id(user_id: UUID = Depends(JWTBearer())) -> UUID:
    """Get current authenticated user ID."""
    return user_id


async def get_beacon_user_id(user_id: UUID = Depends(CookieOrBearerAuth())) -> UUID:
    """Current user for endpoints hit by page-unload beacons."""
    return user_id
