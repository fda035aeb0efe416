"""Export formats for native documents that have no raw byte representation."""

from __future__ import annotations

from typing import Optional

EXPORT_FORMATS = {
    "application/vnd.google-apps.document": "text/plain",
    "application/vnd.google-apps.spreadsheet": "text/csv",
    "application/vnd.google-apps.presentation": "application/pdf",
}


def pick_export_format(content_type: Optional[str]) -> Optional[str]:
    """Return the export format for a native document type, or None for raw download."""
    if content_type is None:
        return None
    return EXPORT_FORMATS.get(content_type)


__all__ = ["EXPORT_FORMATS", "pick_export_format"]
