"""Configuration loading for drivemirror (.drivemirror.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml

from .errors import ConfigError
from .paths import DuplicatePolicy

CONFIG_FILENAME = ".drivemirror.yml"

GOOGLE_TOKEN_ENV_KEYS = ("DRIVEMIRROR_GOOGLE_TOKEN", "GOOGLE_ACCESS_TOKEN")
GITHUB_TOKEN_ENV_KEYS = ("DRIVEMIRROR_GITHUB_TOKEN", "GITHUB_TOKEN")


@dataclass
class SourceConfig:
    """Source tree service settings."""

    api_base: Optional[str] = None
    page_size: Optional[int] = None
    request_timeout: Optional[float] = 60.0


@dataclass
class HostingConfig:
    """Repository hosting service settings."""

    api_base: Optional[str] = None
    user_agent: Optional[str] = None
    private: bool = False
    description: Optional[str] = None
    commit_message: Optional[str] = None
    branch: str = "main"
    request_timeout: Optional[float] = 60.0


@dataclass
class ConcurrencyConfig:
    """Worker pool sizes; 1 keeps the sequential behaviour."""

    collector_workers: int = 4
    blob_workers: int = 4


@dataclass
class MirrorConfig:
    """Represents the settings defined in .drivemirror.yml."""

    root: Path
    source: SourceConfig = field(default_factory=SourceConfig)
    hosting: HostingConfig = field(default_factory=HostingConfig)
    concurrency: ConcurrencyConfig = field(default_factory=ConcurrencyConfig)
    max_depth: int = 64
    on_duplicate_path: DuplicatePolicy = DuplicatePolicy.ERROR


def load_config(config_path: Path) -> MirrorConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MirrorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = MirrorConfig(root=root)

    source_data = _as_dict(data.get("source"))
    if source_data:
        config.source = SourceConfig(
            api_base=_as_str(source_data.get("api_base")),
            page_size=_as_int(source_data.get("page_size")),
            request_timeout=_as_float(source_data.get("request_timeout"))
            or SourceConfig.request_timeout,
        )

    hosting_data = _as_dict(data.get("hosting"))
    if hosting_data:
        config.hosting = HostingConfig(
            api_base=_as_str(hosting_data.get("api_base")),
            user_agent=_as_str(hosting_data.get("user_agent")),
            private=_as_bool(hosting_data.get("private")) or False,
            description=_as_str(hosting_data.get("description")),
            commit_message=_as_str(hosting_data.get("commit_message")),
            branch=_as_str(hosting_data.get("branch")) or HostingConfig.branch,
            request_timeout=_as_float(hosting_data.get("request_timeout"))
            or HostingConfig.request_timeout,
        )

    concurrency_data = _as_dict(data.get("concurrency"))
    if concurrency_data:
        config.concurrency = ConcurrencyConfig(
            collector_workers=_positive(concurrency_data.get("collector_workers"), 4),
            blob_workers=_positive(concurrency_data.get("blob_workers"), 4),
        )

    max_depth = _as_int(data.get("max_depth"))
    if max_depth is not None:
        if max_depth < 0:
            raise ConfigError("max_depth must not be negative")
        config.max_depth = max_depth

    if data.get("on_duplicate_path") is not None:
        config.on_duplicate_path = DuplicatePolicy.parse(_as_str(data.get("on_duplicate_path")))

    return config


def resolve_token(explicit: str | None, env_keys: Sequence[str]) -> str | None:
    """Return the explicit token, else the first populated environment variable."""
    if explicit and explicit.strip():
        return explicit.strip()
    for key in env_keys:
        value = os.getenv(key)
        if value and value.strip():
            return value.strip()
    return None


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _positive(value: Any, default: int) -> int:
    parsed = _as_int(value)
    if parsed is None:
        return default
    return max(1, parsed)


__all__ = [
    "CONFIG_FILENAME",
    "ConcurrencyConfig",
    "GITHUB_TOKEN_ENV_KEYS",
    "GOOGLE_TOKEN_ENV_KEYS",
    "HostingConfig",
    "MirrorConfig",
    "SourceConfig",
    "load_config",
    "resolve_token",
]
