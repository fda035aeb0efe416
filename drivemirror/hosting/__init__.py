"""Repository hosting service bindings."""

from .base import CreatedRepository, HostingService
from .github import GitHubClient

__all__ = ["CreatedRepository", "GitHubClient", "HostingService"]
