"""Contract consumed by the publisher for building a remote repository."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from ..models import TreeEntry


@dataclass(frozen=True)
class CreatedRepository:
    """Owner and canonical URL resolved by repository creation."""

    owner: str
    name: str
    url: str


class HostingService(Protocol):
    """Repository creation plus git object creation endpoints."""

    def create_repository(self, name: str) -> CreatedRepository:
        ...

    def create_blob(self, owner: str, repo: str, content_b64: str) -> str:
        ...

    def create_tree(self, owner: str, repo: str, entries: Sequence[TreeEntry]) -> str:
        ...

    def create_commit(self, owner: str, repo: str, message: str, tree: str) -> str:
        ...

    def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        ...
