"""Build a new remote repository's initial commit from a flat file set."""

from __future__ import annotations

import base64
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence

from .cancellation import cancel_pending, check_cancelled
from .errors import InvalidRequest, MirrorError
from .hosting.base import HostingService
from .hosting.github import GitHubClient
from .logging import get_logger
from .models import CollectedFile, PublishResult, TreeEntry
from .paths import DuplicatePolicy, resolve_duplicates

_POLL_INTERVAL = 0.05


class PublishStage(str, Enum):
    """Progress of one publish run; each state requires the previous one."""

    PENDING = "pending"
    CREATED = "created"
    BLOBS_DONE = "blobs_done"
    TREE_DONE = "tree_done"
    COMMIT_DONE = "commit_done"
    REF_DONE = "ref_done"


_NEXT_STAGE = {
    PublishStage.PENDING: PublishStage.CREATED,
    PublishStage.CREATED: PublishStage.BLOBS_DONE,
    PublishStage.BLOBS_DONE: PublishStage.TREE_DONE,
    PublishStage.TREE_DONE: PublishStage.COMMIT_DONE,
    PublishStage.COMMIT_DONE: PublishStage.REF_DONE,
}


@dataclass
class PublishState:
    """Inspectable record of what a publish run has created so far."""

    repo_name: str
    stage: PublishStage = PublishStage.PENDING
    owner: Optional[str] = None
    repository_url: Optional[str] = None
    blob_refs: Dict[str, str] = field(default_factory=dict)
    tree_ref: Optional[str] = None
    commit_ref: Optional[str] = None
    failed_step: Optional[str] = None

    def advance(self, target: PublishStage) -> None:
        expected = _NEXT_STAGE.get(self.stage)
        if expected is not target:
            raise RuntimeError(f"Cannot move publish state from {self.stage.value} to {target.value}")
        self.stage = target

    @property
    def complete(self) -> bool:
        return self.stage is PublishStage.REF_DONE


class Publisher:
    """Creates a repository, then its blobs, tree, commit and branch ref in order."""

    DEFAULT_COMMIT_MESSAGE = "Initial commit - import from Google Drive"
    DEFAULT_BRANCH = "main"

    def __init__(
        self,
        hosting_factory: Callable[[str], HostingService] = GitHubClient,
        *,
        max_workers: int = 4,
        branch: str | None = None,
        commit_message: str | None = None,
        duplicate_policy: DuplicatePolicy | str = DuplicatePolicy.ERROR,
    ) -> None:
        self._hosting_factory = hosting_factory
        self.max_workers = max(1, int(max_workers))
        self.branch = branch or self.DEFAULT_BRANCH
        self.commit_message = commit_message or self.DEFAULT_COMMIT_MESSAGE
        self.duplicate_policy = DuplicatePolicy.parse(duplicate_policy)
        self.last_state: Optional[PublishState] = None
        self.logger = get_logger("publisher")

    def publish(
        self,
        credential: str,
        repo_name: str,
        files: Sequence[CollectedFile],
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> PublishResult:
        """Publish ``files`` as the single initial commit of a new repository.

        Any failure after repository creation leaves that repository on the
        remote service; the raised error's ``state`` records how far the run
        got and ``partial_repository`` names the URL.
        """
        if not repo_name or not repo_name.strip():
            raise InvalidRequest("A repository name is required")
        if not files:
            raise InvalidRequest("No files to publish; a tree needs at least one entry")
        unique_files = resolve_duplicates(files, self.duplicate_policy)
        hosting = self._hosting_factory(credential)
        state = PublishState(repo_name=repo_name)
        self.last_state = state

        with self._step(state, "create_repository", cancel_event):
            created = hosting.create_repository(repo_name)
            state.owner = created.owner
            state.repository_url = created.url
            repo = created.name
            state.advance(PublishStage.CREATED)
        self.logger.info("Created repository %s", created.url)

        with self._step(state, "create_blobs", cancel_event):
            self._create_blobs(hosting, state, repo, unique_files, cancel_event)
            state.advance(PublishStage.BLOBS_DONE)
        self.logger.info("Uploaded %d blob(s)", len(state.blob_refs))

        with self._step(state, "create_tree", cancel_event):
            entries = [
                TreeEntry(path=item.path, sha=state.blob_refs[item.path]) for item in unique_files
            ]
            state.tree_ref = hosting.create_tree(state.owner, repo, entries)
            state.advance(PublishStage.TREE_DONE)

        with self._step(state, "create_commit", cancel_event):
            state.commit_ref = hosting.create_commit(
                state.owner, repo, self.commit_message, state.tree_ref
            )
            state.advance(PublishStage.COMMIT_DONE)

        with self._step(state, "create_ref", cancel_event):
            hosting.create_ref(state.owner, repo, self.branch, state.commit_ref)
            state.advance(PublishStage.REF_DONE)
        self.logger.info("Pointed %s at commit %s", self.branch, state.commit_ref)

        return PublishResult(repository_url=created.url, files_published=len(unique_files))

    def _create_blobs(
        self,
        hosting: HostingService,
        state: PublishState,
        repo: str,
        files: Sequence[CollectedFile],
        cancel_event: Optional[threading.Event],
    ) -> None:
        owner = state.owner or ""

        def upload(item: CollectedFile) -> str:
            check_cancelled(cancel_event, stage="create_blobs")
            encoded = base64.b64encode(item.content).decode("ascii")
            try:
                sha = hosting.create_blob(owner, repo, encoded)
            except MirrorError as exc:
                if exc.path is None:
                    exc.path = item.path
                raise
            self.logger.debug("Blob %s -> %s", item.path, sha)
            return sha

        pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="drivemirror-blob")
        futures: Dict["Future[str]", str] = {}
        try:
            for item in files:
                futures[pool.submit(upload, item)] = item.path
            outstanding = set(futures)
            timeout = _POLL_INTERVAL if cancel_event is not None else None
            while outstanding:
                check_cancelled(cancel_event, stage="create_blobs")
                done, outstanding = wait(outstanding, timeout=timeout, return_when=FIRST_EXCEPTION)
                for future in done:
                    # Keyed by unique path, written only from this thread.
                    state.blob_refs[futures[future]] = future.result()
        except BaseException:
            cancel_pending(futures)
            raise
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    @contextmanager
    def _step(
        self,
        state: PublishState,
        name: str,
        cancel_event: Optional[threading.Event],
    ) -> Iterator[None]:
        try:
            check_cancelled(cancel_event, stage=name)
            yield
        except MirrorError as exc:
            state.failed_step = name
            exc.stage = name
            exc.state = state
            self.logger.error("Publish failed during %s: %s", name, exc.message)
            raise


__all__ = ["PublishStage", "PublishState", "Publisher"]
