from __future__ import annotations

import pytest

from tests._fixtures.fake_runner import FakeRunner


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Provide a runner that answers only the commands a test scripts."""
    return FakeRunner()
