"""Middleware for authentication and other cross-cutting concerns."""

from .auth import CookieOrBearerAuth, JWTBearer, get_beacon_user_id, get_current_user_id

__all__ = ["get_current_user_id", "get_beacon_user_id", "JWTBearer", "CookieOrBearerAuth"]
