"""Tests for drivemirror.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from drivemirror.config import (
    GITHUB_TOKEN_ENV_KEYS,
    MirrorConfig,
    load_config,
    resolve_token,
)
from drivemirror.errors import ConfigError
from drivemirror.paths import DuplicatePolicy


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MirrorConfig)
    assert config.root == tmp_path.resolve()
    assert config.source.api_base is None
    assert config.hosting.branch == "main"
    assert config.hosting.private is False
    assert config.concurrency.collector_workers == 4
    assert config.concurrency.blob_workers == 4
    assert config.max_depth == 64
    assert config.on_duplicate_path is DuplicatePolicy.ERROR


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".drivemirror.yml"
    config_file.write_text(
        """
source:
  api_base: "http://localhost:9000/drive/v3"
  page_size: 200
  request_timeout: 30
hosting:
  api_base: "https://ghe.example.com/api/v3"
  user_agent: "mirror-bot"
  private: true
  description: "Team drive snapshot"
  commit_message: "Snapshot"
  branch: trunk
concurrency:
  collector_workers: 8
  blob_workers: 0
max_depth: 10
on_duplicate_path: last_write_wins
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.source.api_base == "http://localhost:9000/drive/v3"
    assert config.source.page_size == 200
    assert config.source.request_timeout == 30.0
    assert config.hosting.api_base == "https://ghe.example.com/api/v3"
    assert config.hosting.user_agent == "mirror-bot"
    assert config.hosting.private is True
    assert config.hosting.description == "Team drive snapshot"
    assert config.hosting.commit_message == "Snapshot"
    assert config.hosting.branch == "trunk"
    assert config.concurrency.collector_workers == 8
    assert config.concurrency.blob_workers == 1
    assert config.max_depth == 10
    assert config.on_duplicate_path is DuplicatePolicy.LAST_WRITE_WINS


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".drivemirror.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".drivemirror.yml").write_text("source: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_unknown_duplicate_policy(tmp_path: Path) -> None:
    (tmp_path / ".drivemirror.yml").write_text("on_duplicate_path: merge\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_resolve_token_prefers_explicit_then_env(monkeypatch) -> None:
    monkeypatch.delenv("DRIVEMIRROR_GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", " env-token ")

    assert resolve_token("cli-token", GITHUB_TOKEN_ENV_KEYS) == "cli-token"
    assert resolve_token(None, GITHUB_TOKEN_ENV_KEYS) == "env-token"

    monkeypatch.delenv("GITHUB_TOKEN")
    assert resolve_token("  ", GITHUB_TOKEN_ENV_KEYS) is None
