"""Path uniqueness rules applied to collected file sets."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Sequence, Set

from .errors import ConfigError, PathCollision
from .models import CollectedFile

SEPARATOR = "/"


class DuplicatePolicy(str, Enum):
    """How to treat two files that resolve to the same path."""

    ERROR = "error"
    LAST_WRITE_WINS = "last-write-wins"

    @classmethod
    def parse(cls, value: "str | DuplicatePolicy | None") -> "DuplicatePolicy":
        if value is None:
            return cls.ERROR
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower().replace("_", "-")
        for member in cls:
            if member.value == normalised:
                return member
        raise ConfigError(
            f"Unknown duplicate path policy '{value}'; expected one of "
            + ", ".join(member.value for member in cls)
        )


def resolve_duplicates(
    files: Sequence[CollectedFile],
    policy: DuplicatePolicy = DuplicatePolicy.ERROR,
) -> List[CollectedFile]:
    """Return ``files`` with unique paths, or raise ``PathCollision``.

    Under ``LAST_WRITE_WINS`` a repeated path keeps the position of its first
    occurrence and the content of its last one. A file whose path is also a
    directory of another file is rejected under every policy, since a git tree
    cannot hold both.
    """
    unique: Dict[str, CollectedFile] = {}
    for item in files:
        if not item.path:
            raise PathCollision("Collected file has an empty path")
        if item.path in unique and policy is DuplicatePolicy.ERROR:
            raise PathCollision(
                f"Path '{item.path}' is produced by more than one source file",
                path=item.path,
            )
        unique[item.path] = item

    directories = _directories_of(unique)
    for path in unique:
        if path in directories:
            raise PathCollision(
                f"Path '{path}' is both a file and a folder",
                path=path,
            )
    return list(unique.values())


def _directories_of(paths: Iterable[str]) -> Set[str]:
    directories: Set[str] = set()
    for path in paths:
        parent = path
        while SEPARATOR in parent:
            parent = parent.rsplit(SEPARATOR, 1)[0]
            if parent in directories:
                break
            directories.add(parent)
    return directories


__all__ = ["DuplicatePolicy", "resolve_duplicates"]
