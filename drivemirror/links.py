"""Parsing of source links into bare identifiers."""

from __future__ import annotations

import re

from .errors import NotFound

_ID_PATTERN = re.compile(r"[-\w]{25,}")


def extract_source_id(link_or_id: str | None) -> str:
    """Return the file or folder identifier embedded in a share link.

    Accepts full Drive URLs (``/drive/folders/<id>``, ``/file/d/<id>/view``,
    ``open?id=<id>``) as well as a bare identifier.
    """
    cleaned = (link_or_id or "").strip()
    if not cleaned:
        raise NotFound("No source link or identifier supplied")
    match = _ID_PATTERN.search(cleaned)
    if match:
        return match.group(0)
    return cleaned


__all__ = ["extract_source_id"]
