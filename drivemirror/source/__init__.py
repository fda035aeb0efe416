"""Source tree service bindings."""

from .base import ChildPage, SourceTree
from .drive import DriveClient

__all__ = ["ChildPage", "DriveClient", "SourceTree"]
