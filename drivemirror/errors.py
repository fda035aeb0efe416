"""Error taxonomy for collection and publishing failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .publisher import PublishState


class MirrorError(RuntimeError):
    """Base class for every failure surfaced by the pipeline.

    Context attributes are optional and filled in by whichever layer knows
    them: the HTTP transport sets ``status`` and ``payload``, the collector
    sets ``path``/``node_id`` and the publisher sets ``stage`` and ``state``.
    """

    kind = "error"

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        path: Optional[str] = None,
        node_id: Optional[str] = None,
        status: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.path = path
        self.node_id = node_id
        self.status = status
        self.payload = payload
        self.state: Optional["PublishState"] = None

    @property
    def partial_repository(self) -> Optional[str]:
        """URL of a repository left behind by a failed publish, if any."""
        if self.state is None:
            return None
        return self.state.repository_url

    def describe(self) -> str:
        """Return a single-line summary suitable for users and logs."""
        parts = [f"{self.kind}: {self.message}"]
        if self.stage:
            parts.append(f"stage={self.stage}")
        if self.path:
            parts.append(f"path={self.path}")
        if self.node_id:
            parts.append(f"id={self.node_id}")
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.partial_repository:
            parts.append(f"partial repository left at {self.partial_repository}")
        return " | ".join(parts)


class AuthFailure(MirrorError):
    """Credential rejected by either remote service."""

    kind = "auth_failure"


class NotFound(MirrorError):
    """Root identifier or child item does not exist."""

    kind = "not_found"


class NameConflict(MirrorError):
    """Repository name already taken for the authenticated owner."""

    kind = "name_conflict"


class RemoteServiceError(MirrorError):
    """Unclassified non-2xx response or transport failure."""

    kind = "remote_service_error"


class PathCollision(MirrorError):
    """Two collected files resolve to the same relative path."""

    kind = "path_collision"


class StructuralError(MirrorError):
    """Source tree is cyclic or deeper than the configured bound."""

    kind = "structural_error"


class Cancelled(MirrorError):
    """The caller raised the cancellation signal."""

    kind = "cancelled"


class ConfigError(MirrorError):
    """Raised when the configuration file cannot be parsed."""

    kind = "config_error"


class InvalidRequest(MirrorError):
    """Caller input that cannot start a run, such as a blank repository name."""

    kind = "invalid_request"


__all__ = [
    "AuthFailure",
    "Cancelled",
    "ConfigError",
    "InvalidRequest",
    "MirrorError",
    "NameConflict",
    "NotFound",
    "PathCollision",
    "RemoteServiceError",
    "StructuralError",
]
