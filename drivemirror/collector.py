"""Recursive source tree walk producing a flat, ordered file set."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Set

from .cancellation import await_result, cancel_pending, check_cancelled
from .errors import MirrorError, StructuralError
from .exports import pick_export_format
from .logging import get_logger
from .models import CollectedFile, SourceNode
from .paths import SEPARATOR, DuplicatePolicy, resolve_duplicates
from .source.base import SourceTree


@dataclass
class _PendingFile:
    path: str
    node: SourceNode
    future: "Future[bytes]"


class Collector:
    """Walks a source tree and materializes every leaf's bytes.

    Listings are walked depth-first in the order the service returns them;
    leaf downloads run on a bounded thread pool and are gathered back in
    walk order, so the output is stable regardless of ``max_workers``.
    """

    def __init__(
        self,
        source: SourceTree,
        *,
        max_workers: int = 4,
        max_depth: int = 64,
        duplicate_policy: DuplicatePolicy | str = DuplicatePolicy.ERROR,
    ) -> None:
        self.source = source
        self.max_workers = max(1, int(max_workers))
        self.max_depth = max_depth
        self.duplicate_policy = DuplicatePolicy.parse(duplicate_policy)
        self.logger = get_logger("collector")

    def collect(
        self, root_id: str, *, cancel_event: Optional[threading.Event] = None
    ) -> List[CollectedFile]:
        """Return every leaf under ``root_id`` as (path, content) pairs."""
        check_cancelled(cancel_event, stage="collect")
        root = self._call(lambda: self.source.get_metadata(root_id), node_id=root_id)
        if not root.name:
            raise StructuralError("Source root has an empty name", node_id=root.id)
        self.logger.info("Collecting from %s '%s'", root.kind.value, root.name)

        pending: List[_PendingFile] = []
        pool = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="drivemirror-collect"
        )
        try:
            if root.is_container:
                self._walk(root, root.name + SEPARATOR, 0, set(), pool, pending, cancel_event)
            else:
                self._schedule(root.name, root, pool, pending, cancel_event)

            files: List[CollectedFile] = []
            for item in pending:
                content = await_result(item.future, cancel_event, stage="collect")
                files.append(CollectedFile(path=item.path, content=content))
        except BaseException:
            cancel_pending(item.future for item in pending)
            raise
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

        files = resolve_duplicates(files, self.duplicate_policy)
        self.logger.info("Collected %d file(s)", len(files))
        return files

    def materialize(self, node: SourceNode) -> bytes:
        """Download a leaf, exporting native documents to their fixed format."""
        export_format = pick_export_format(node.content_type)
        if export_format is not None:
            self.logger.debug("Exporting %s (%s) as %s", node.name, node.content_type, export_format)
            return self.source.export_content(node.id, export_format)
        self.logger.debug("Downloading %s", node.name)
        return self.source.read_content(node.id)

    def _walk(
        self,
        folder: SourceNode,
        prefix: str,
        depth: int,
        visited: Set[str],
        pool: ThreadPoolExecutor,
        pending: List[_PendingFile],
        cancel_event: Optional[threading.Event],
    ) -> None:
        if depth > self.max_depth:
            raise StructuralError(
                f"Folder nesting exceeds the maximum depth of {self.max_depth}",
                path=prefix.rstrip(SEPARATOR),
                node_id=folder.id,
            )
        if folder.id in visited:
            raise StructuralError(
                "Folder appears more than once in its own ancestry",
                path=prefix.rstrip(SEPARATOR),
                node_id=folder.id,
            )
        visited.add(folder.id)

        page_token: Optional[str] = None
        while True:
            check_cancelled(cancel_event, stage="collect")
            token = page_token
            page = self._call(
                lambda: self.source.list_children(folder.id, token),
                node_id=folder.id,
                path=prefix.rstrip(SEPARATOR),
            )
            for child in page.entries:
                if not child.name:
                    raise StructuralError(
                        "Source item has an empty name", path=prefix.rstrip(SEPARATOR), node_id=child.id
                    )
                if child.is_container:
                    self._walk(
                        child,
                        prefix + child.name + SEPARATOR,
                        depth + 1,
                        visited,
                        pool,
                        pending,
                        cancel_event,
                    )
                else:
                    self._schedule(prefix + child.name, child, pool, pending, cancel_event)
            _raise_first_failure(pending)
            page_token = page.next_page_token
            if not page_token:
                break

        visited.discard(folder.id)

    def _schedule(
        self,
        path: str,
        node: SourceNode,
        pool: ThreadPoolExecutor,
        pending: List[_PendingFile],
        cancel_event: Optional[threading.Event],
    ) -> None:
        def fetch() -> bytes:
            check_cancelled(cancel_event, stage="collect")
            return self._call(lambda: self.materialize(node), node_id=node.id, path=path)

        pending.append(_PendingFile(path=path, node=node, future=pool.submit(fetch)))

    @staticmethod
    def _call(operation, *, node_id: str | None = None, path: str | None = None):
        try:
            return operation()
        except MirrorError as exc:
            if exc.node_id is None:
                exc.node_id = node_id
            if exc.path is None:
                exc.path = path
            if exc.stage is None:
                exc.stage = "collect"
            raise


def _raise_first_failure(pending: List[_PendingFile]) -> None:
    for item in pending:
        if item.future.done() and not item.future.cancelled():
            error = item.future.exception()
            if error is not None:
                raise error


__all__ = ["Collector", "SEPARATOR"]
