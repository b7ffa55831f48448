"""Shared pytest fixtures for convergence-check tests.

No network access: every repository read is served by ``FakeRepository``
through ``httpx.MockTransport``.
"""

import pytest

from fakes import FakeRepository


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_repo():
    return FakeRepository()
