"""Contract consumed by the collector for reading a source tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from ..models import SourceNode


@dataclass
class ChildPage:
    """One page of a container listing."""

    entries: List[SourceNode] = field(default_factory=list)
    next_page_token: Optional[str] = None


class SourceTree(Protocol):
    """Read-only view of a hierarchical cloud file store."""

    def get_metadata(self, node_id: str) -> SourceNode:
        ...

    def list_children(self, folder_id: str, page_token: str | None = None) -> ChildPage:
        ...

    def read_content(self, node_id: str) -> bytes:
        ...

    def export_content(self, node_id: str, target_format: str) -> bytes:
        ...
