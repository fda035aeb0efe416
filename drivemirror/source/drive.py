"""Google Drive v3 REST binding of the source tree contract."""

from __future__ import annotations

from typing import Any, Mapping, Optional
from urllib.parse import quote

from ..errors import RemoteServiceError
from ..http import HttpTransport
from ..logging import get_logger
from ..models import NodeKind, SourceNode
from .base import ChildPage

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class DriveClient:
    """Reads folder listings and file content from Google Drive."""

    DEFAULT_API_BASE = "https://www.googleapis.com/drive/v3"

    def __init__(
        self,
        token: str,
        *,
        api_base: str | None = None,
        page_size: Optional[int] = None,
        request_timeout: Optional[float] = 60.0,
        transport: HttpTransport | None = None,
    ) -> None:
        self.api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self.page_size = page_size
        self._transport = transport or HttpTransport(
            {"Authorization": f"Bearer {token}"},
            request_timeout=request_timeout,
        )
        self.logger = get_logger("source.drive")

    def get_metadata(self, node_id: str) -> SourceNode:
        payload = self._transport.get_json(
            self._file_url(node_id),
            {"fields": "id,name,mimeType,parents"},
        )
        return _node_from_payload(payload)

    def list_children(self, folder_id: str, page_token: str | None = None) -> ChildPage:
        escaped = folder_id.replace("\\", "\\\\").replace("'", "\\'")
        params: dict[str, Any] = {
            "q": f"'{escaped}' in parents and trashed=false",
            "fields": "nextPageToken, files(id, name, mimeType)",
            "pageToken": page_token,
            "pageSize": self.page_size,
        }
        payload = self._transport.get_json(f"{self.api_base}/files", params)
        if not isinstance(payload, dict):
            raise RemoteServiceError("Drive listing returned an unexpected payload", payload=payload)
        files = payload.get("files") or []
        entries = [_node_from_payload(item) for item in files]
        next_token = payload.get("nextPageToken") or None
        self.logger.debug(
            "Listed %d children of %s (more pages: %s)", len(entries), folder_id, bool(next_token)
        )
        return ChildPage(entries=entries, next_page_token=next_token)

    def read_content(self, node_id: str) -> bytes:
        return self._transport.get_bytes(self._file_url(node_id), {"alt": "media"})

    def export_content(self, node_id: str, target_format: str) -> bytes:
        return self._transport.get_bytes(
            f"{self._file_url(node_id)}/export", {"mimeType": target_format}
        )

    def _file_url(self, node_id: str) -> str:
        return f"{self.api_base}/files/{quote(node_id, safe='')}"


def _node_from_payload(payload: Mapping[str, Any]) -> SourceNode:
    if not isinstance(payload, dict):
        raise RemoteServiceError("Drive returned an unexpected file payload", payload=payload)
    node_id = payload.get("id")
    name = payload.get("name")
    mime_type = payload.get("mimeType")
    if not isinstance(node_id, str) or not isinstance(name, str):
        raise RemoteServiceError("Drive file payload lacks id or name", payload=payload)
    kind = NodeKind.CONTAINER if mime_type == FOLDER_MIME_TYPE else NodeKind.LEAF
    return SourceNode(
        id=node_id,
        name=name,
        kind=kind,
        content_type=mime_type if isinstance(mime_type, str) else None,
    )


__all__ = ["DriveClient", "FOLDER_MIME_TYPE"]
