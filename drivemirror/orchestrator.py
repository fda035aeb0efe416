"""Pipeline orchestration: collect a source tree, then publish it."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

from .collector import Collector
from .config import MirrorConfig, load_config
from .errors import AuthFailure, InvalidRequest
from .hosting.base import HostingService
from .hosting.github import GitHubClient
from .links import extract_source_id
from .logging import get_logger
from .models import PublishResult
from .publisher import Publisher
from .source.base import SourceTree
from .source.drive import DriveClient


class Orchestrator:
    """Wires Collector output into Publisher input for one mirror run."""

    def __init__(
        self,
        config: MirrorConfig | None = None,
        *,
        source_factory: Callable[[str], SourceTree] | None = None,
        hosting_factory: Callable[[str], HostingService] | None = None,
    ) -> None:
        self.config = config or MirrorConfig(root=Path.cwd())
        self._source_factory = source_factory or self._default_source
        self._hosting_factory = hosting_factory or self._default_hosting
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_path(cls, config_path: Path, **kwargs) -> "Orchestrator":
        return cls(load_config(config_path), **kwargs)

    def run(
        self,
        source: str,
        repo_name: str,
        *,
        google_token: str | None,
        github_token: str | None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PublishResult | None:
        """Mirror ``source`` into a new repository; ``None`` when nothing was collected."""
        repo_name = (repo_name or "").strip()
        if not repo_name:
            raise InvalidRequest("A repository name is required")
        if not google_token:
            raise AuthFailure("No Google Drive access token supplied", stage="collect")
        if not github_token:
            raise AuthFailure("No GitHub token supplied", stage="create_repository")

        root_id = extract_source_id(source)
        self.logger.info("Mirroring %s into repository '%s'", root_id, repo_name)

        collector = Collector(
            self._source_factory(google_token.strip()),
            max_workers=self.config.concurrency.collector_workers,
            max_depth=self.config.max_depth,
            duplicate_policy=self.config.on_duplicate_path,
        )
        files = collector.collect(root_id, cancel_event=cancel_event)
        if not files:
            self.logger.warning("No files found under %s; repository not created", root_id)
            return None

        publisher = Publisher(
            self._hosting_factory,
            max_workers=self.config.concurrency.blob_workers,
            branch=self.config.hosting.branch,
            commit_message=self.config.hosting.commit_message,
            duplicate_policy=self.config.on_duplicate_path,
        )
        result = publisher.publish(github_token.strip(), repo_name, files, cancel_event=cancel_event)
        self.logger.info(
            "Published %d file(s) to %s", result.files_published, result.repository_url
        )
        return result

    def _default_source(self, token: str) -> SourceTree:
        settings = self.config.source
        return DriveClient(
            token,
            api_base=settings.api_base,
            page_size=settings.page_size,
            request_timeout=settings.request_timeout,
        )

    def _default_hosting(self, token: str) -> HostingService:
        settings = self.config.hosting
        return GitHubClient(
            token,
            api_base=settings.api_base,
            user_agent=settings.user_agent,
            description=settings.description,
            private=settings.private,
            request_timeout=settings.request_timeout,
        )


__all__ = ["Orchestrator"]
