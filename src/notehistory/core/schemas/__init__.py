"""
Pydantic schemas for validating and documenting requests and responses.

This package exposes the Pydantic models used across the application to
define input/output contracts for snapshots, restores, history reads and
common responses (pagination, error and health formats).
"""

from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .versions import (
    NoteStateResponse,
    NoteVersionDetail,
    NoteVersionSummary,
    RestoreRequest,
    RestoreResult,
    SnapshotReason,
    SnapshotRequest,
    SnapshotResult,
    VersionCreate,
    VersionListResponse,
)

__all__ = [
    # Version schemas
    "VersionCreate",
    "NoteVersionSummary",
    "NoteVersionDetail",
    "VersionListResponse",
    "SnapshotReason",
    "SnapshotResult",
    "SnapshotRequest",
    "RestoreRequest",
    "RestoreResult",
    "NoteStateResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
