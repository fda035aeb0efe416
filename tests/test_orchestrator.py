"""Tests for drivemirror.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from drivemirror.config import MirrorConfig
from drivemirror.errors import AuthFailure, InvalidRequest, NotFound
from drivemirror.orchestrator import Orchestrator
from tests._fixtures.remote_fakes import FakeDrive, FakeHosting


def _orchestrator(drive: FakeDrive, hosting: FakeHosting, tokens: list[tuple[str, str]]) -> Orchestrator:
    def source_factory(token: str) -> FakeDrive:
        tokens.append(("source", token))
        return drive

    def hosting_factory(token: str) -> FakeHosting:
        tokens.append(("hosting", token))
        return hosting

    return Orchestrator(
        MirrorConfig(root=Path(".")),
        source_factory=source_factory,
        hosting_factory=hosting_factory,
    )


def test_run_collects_then_publishes(project_drive: FakeDrive, hosting: FakeHosting) -> None:
    tokens: list[tuple[str, str]] = []
    orchestrator = _orchestrator(project_drive, hosting, tokens)

    result = orchestrator.run(
        "root", "  proj-mirror ", google_token=" g ", github_token="gh"
    )

    assert result is not None
    assert result.files_published == 2
    assert result.repository_url == "https://github.com/octocat/proj-mirror"
    assert tokens == [("source", "g"), ("hosting", "gh")]
    assert hosting.refs


def test_run_skips_repository_for_empty_source(hosting: FakeHosting) -> None:
    drive = FakeDrive()
    drive.add_folder("empty", "empty")

    result = _orchestrator(drive, hosting, []).run(
        "empty", "nothing", google_token="g", github_token="gh"
    )

    assert result is None
    assert hosting.calls == []


def test_run_extracts_identifier_from_link(hosting: FakeHosting) -> None:
    folder_id = "1AbCdEfGhIjKlMnOpQrStUvWxYz"
    drive = FakeDrive()
    drive.add_folder(folder_id, "shared")
    drive.add_file("f", "a.txt", folder_id, b"a")

    result = _orchestrator(drive, hosting, []).run(
        f"https://drive.google.com/drive/folders/{folder_id}?usp=sharing",
        "from-link",
        google_token="g",
        github_token="gh",
    )

    assert result is not None and result.files_published == 1


def test_run_requires_tokens_and_name(project_drive: FakeDrive, hosting: FakeHosting) -> None:
    orchestrator = _orchestrator(project_drive, hosting, [])

    with pytest.raises(AuthFailure):
        orchestrator.run("root", "r", google_token=None, github_token="gh")
    with pytest.raises(AuthFailure):
        orchestrator.run("root", "r", google_token="g", github_token="")
    with pytest.raises(InvalidRequest):
        orchestrator.run("root", "  ", google_token="g", github_token="gh")
    assert project_drive.calls == []


def test_collection_failure_never_reaches_hosting(hosting: FakeHosting) -> None:
    with pytest.raises(NotFound):
        _orchestrator(FakeDrive(), hosting, []).run(
            "missing", "r", google_token="g", github_token="gh"
        )

    assert hosting.calls == []


def test_from_path_loads_configuration(tmp_path: Path) -> None:
    (tmp_path / ".drivemirror.yml").write_text("max_depth: 3\n", encoding="utf-8")

    orchestrator = Orchestrator.from_path(tmp_path)

    assert orchestrator.config.max_depth == 3
