"""
Service layer interfaces and implementations.

The interfaces are defined first, concrete implementations take a session
and an optional permission gate.
"""

from .interfaces import (
    IPermissionGate,
    ISnapshotService,
    IRestoreService,
    IVersionService,
    IHealthService,
)

from .permission_gate import (
    NoteScope,
    PersonalScope,
    WorkspaceScope,
    WorkspacePermissionGate,
    note_scope,
)
from .version_allocator import VersionAllocator
from .snapshot_service import SnapshotService
from .restore_service import RestoreService
from .version_service import VersionService
from .health_service import HealthService

__all__ = [
    # Interfaces
    "IPermissionGate",
    "ISnapshotService",
    "IRestoreService",
    "IVersionService",
    "IHealthService",

    # Implementations
    "NoteScope",
    "PersonalScope",
    "WorkspaceScope",
    "WorkspacePermissionGate",
    "note_scope",
    "VersionAllocator",
    "SnapshotService",
    "RestoreService",
    "VersionService",
    "HealthService",
]
