"""
Pytest configuration and shared fixtures for the tip triage tests.

Testing Standards:
- Async tests run in pytest-asyncio auto mode (see pyproject.toml)
- Use AsyncMock to make a collaborator fail
- Time-dependent tests use FakeTimeAuthority, never the wall clock
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from tests.helpers import FakeTimeAuthority, TriageHarness, build_harness


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from tip_triage import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Clock frozen at 2026-01-01T00:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture
def harness(fake_time_authority: FakeTimeAuthority) -> TriageHarness:
    """Every service wired over fresh stubs and the fake clock."""
    return build_harness(fake_time_authority)
