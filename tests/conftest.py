"""
tests/conftest.py

Shared pytest fixtures available to all test modules.
"""

import pytest

from image_guard.gatekeeper import UploadGatekeeper
from image_guard.plugin import Plugin


@pytest.fixture
def gatekeeper() -> UploadGatekeeper:
    """Gatekeeper with the default image allow-lists."""
    return UploadGatekeeper()


@pytest.fixture
def plugin(tmp_path):
    """An activated plugin writing its KV store under tmp_path."""
    p = Plugin(data_dir=tmp_path)
    p.on_activate()
    yield p
    p.on_deactivate()


@pytest.fixture(autouse=True)
def clear_filter_env(monkeypatch):
    """Keep developer shells from leaking allow-list overrides into tests."""
    monkeypatch.delenv("ALLOWED_MIME_TYPES", raising=False)
    monkeypatch.delenv("ALLOWED_EXTENSIONS", raising=False)
