"""GitHub REST v3 binding of the hosting service contract."""

from __future__ import annotations

from typing import Any, Optional, Sequence
from urllib.parse import quote

from ..errors import MirrorError, NameConflict, RemoteServiceError
from ..http import HttpTransport
from ..logging import get_logger
from ..models import TreeEntry
from .base import CreatedRepository


class GitHubClient:
    """Creates repositories and git objects through the GitHub API."""

    DEFAULT_API_BASE = "https://api.github.com"
    DEFAULT_USER_AGENT = "drivemirror"
    DEFAULT_DESCRIPTION = "Imported from Google Drive"

    def __init__(
        self,
        token: str,
        *,
        api_base: str | None = None,
        user_agent: str | None = None,
        description: str | None = None,
        private: bool = False,
        request_timeout: Optional[float] = 60.0,
        transport: HttpTransport | None = None,
    ) -> None:
        self.api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self.description = description if description is not None else self.DEFAULT_DESCRIPTION
        self.private = private
        self._transport = transport or HttpTransport(
            {
                "Authorization": f"token {token}",
                "User-Agent": user_agent or self.DEFAULT_USER_AGENT,
                "Accept": "application/vnd.github.v3+json",
            },
            request_timeout=request_timeout,
        )
        self.logger = get_logger("hosting.github")

    def create_repository(self, name: str) -> CreatedRepository:
        try:
            payload = self._transport.post_json(
                f"{self.api_base}/user/repos",
                {"name": name, "description": self.description, "private": self.private},
            )
        except MirrorError as exc:
            if exc.status == 422:
                raise NameConflict(
                    f"Repository '{name}' already exists or the name is invalid",
                    status=exc.status,
                    payload=exc.payload,
                ) from exc
            raise

        owner = payload.get("owner") if isinstance(payload, dict) else None
        login = owner.get("login") if isinstance(owner, dict) else None
        url = payload.get("html_url") if isinstance(payload, dict) else None
        if not isinstance(login, str) or not isinstance(url, str):
            raise RemoteServiceError(
                "Repository creation response lacks owner.login or html_url", payload=payload
            )
        resolved_name = payload.get("name") if isinstance(payload.get("name"), str) else name
        return CreatedRepository(owner=login, name=resolved_name, url=url)

    def create_blob(self, owner: str, repo: str, content_b64: str) -> str:
        payload = self._transport.post_json(
            self._git_url(owner, repo, "blobs"),
            {"content": content_b64, "encoding": "base64"},
        )
        return _require_sha(payload, "blob")

    def create_tree(self, owner: str, repo: str, entries: Sequence[TreeEntry]) -> str:
        tree = [
            {"path": entry.path, "mode": entry.mode, "type": entry.type, "sha": entry.sha}
            for entry in entries
        ]
        payload = self._transport.post_json(self._git_url(owner, repo, "trees"), {"tree": tree})
        return _require_sha(payload, "tree")

    def create_commit(self, owner: str, repo: str, message: str, tree: str) -> str:
        payload = self._transport.post_json(
            self._git_url(owner, repo, "commits"),
            {"message": message, "tree": tree},
        )
        return _require_sha(payload, "commit")

    def create_ref(self, owner: str, repo: str, branch: str, sha: str) -> None:
        self._transport.post_json(
            self._git_url(owner, repo, "refs"),
            {"ref": f"refs/heads/{branch}", "sha": sha},
        )

    def _git_url(self, owner: str, repo: str, kind: str) -> str:
        return f"{self.api_base}/repos/{quote(owner, safe='')}/{quote(repo, safe='')}/git/{kind}"


def _require_sha(payload: Any, kind: str) -> str:
    sha = payload.get("sha") if isinstance(payload, dict) else None
    if not isinstance(sha, str) or not sha:
        raise RemoteServiceError(f"{kind} creation response lacks a sha", payload=payload)
    return sha


__all__ = ["GitHubClient"]
