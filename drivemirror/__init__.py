"""Mirror a Google Drive file or folder into a new GitHub repository."""

from .collector import Collector
from .errors import (
    AuthFailure,
    Cancelled,
    ConfigError,
    InvalidRequest,
    MirrorError,
    NameConflict,
    NotFound,
    PathCollision,
    RemoteServiceError,
    StructuralError,
)
from .models import CollectedFile, NodeKind, PublishResult, SourceNode, TreeEntry
from .orchestrator import Orchestrator
from .paths import DuplicatePolicy
from .publisher import PublishStage, PublishState, Publisher

__all__ = [
    "AuthFailure",
    "Cancelled",
    "CollectedFile",
    "Collector",
    "ConfigError",
    "DuplicatePolicy",
    "InvalidRequest",
    "MirrorError",
    "NameConflict",
    "NodeKind",
    "NotFound",
    "Orchestrator",
    "PathCollision",
    "PublishResult",
    "PublishStage",
    "PublishState",
    "Publisher",
    "RemoteServiceError",
    "SourceNode",
    "StructuralError",
    "TreeEntry",
]
