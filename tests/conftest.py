"""
conftest.py — Shared pytest fixtures.
"""

from __future__ import annotations

import pytest

from fakes import FakeYouTube


@pytest.fixture()
def youtube() -> FakeYouTube:
    """A fresh fake upstream per test."""
    return FakeYouTube()
