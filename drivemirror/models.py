"""Core data models shared across drivemirror components."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NodeKind(str, Enum):
    """Shape of a node in the source tree."""

    CONTAINER = "container"
    LEAF = "leaf"


@dataclass(frozen=True)
class SourceNode:
    """Read-only snapshot of a single source tree item."""

    id: str
    name: str
    kind: NodeKind
    content_type: Optional[str] = None

    @property
    def is_container(self) -> bool:
        return self.kind is NodeKind.CONTAINER


@dataclass(frozen=True)
class CollectedFile:
    """A materialized leaf: slash-delimited relative path plus its bytes."""

    path: str
    content: bytes


@dataclass(frozen=True)
class TreeEntry:
    """One row of a tree creation request."""

    path: str
    sha: str
    mode: str = "100644"
    type: str = "blob"


@dataclass(frozen=True)
class PublishResult:
    """Terminal success value of a mirror run."""

    repository_url: str
    files_published: int
