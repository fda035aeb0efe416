from __future__ import annotations

import pytest

from tests._fixtures.remote_fakes import FakeDrive, FakeHosting, build_project_drive


@pytest.fixture
def project_drive() -> FakeDrive:
    """Provide the proj/docs/budget + proj/logo.png source tree."""
    return build_project_drive()


@pytest.fixture
def hosting() -> FakeHosting:
    """Provide a fresh hosting double owned by 'octocat'."""
    return FakeHosting()
