"""Domain errors raised by the history services.

They subclass FastAPI's HTTPException so routers can let them bubble up
unchanged, while background callers (timers, editor hooks) catch them by type.
Storage failures are not wrapped: SQLAlchemy errors propagate as they are.
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Note missing or soft-deleted, or version missing / owned by another note."""

    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    def __str__(self) -> str:
        return str(self.detail)


class ForbiddenError(HTTPException):
    """Capability check failed."""

    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

    def __str__(self) -> str:
        return str(self.detail)
