"""
Global pytest configuration and fixtures for test isolation.

Settings are cached and contexts read ``os.environ``, so every test starts
with a cleared settings cache and no ``BCTX_`` variables.
"""

import os
import textwrap
import warnings

import pytest


def reset_all_global_state():
    """Reset cached settings so environment changes are seen."""
    from beancontext.config.settings import get_settings

    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def test_isolation(monkeypatch):
    """Per-test isolation to ensure clean state for each test."""
    for name in list(os.environ):
        if name.upper().startswith("BCTX_"):
            monkeypatch.delenv(name, raising=False)
    reset_all_global_state()
    yield
    reset_all_global_state()


@pytest.fixture
def write_file(tmp_path):
    """Write dedented text to a file under ``tmp_path`` and return its path."""

    def _write(name: str, content: str):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def beans_yaml(write_file):
    """A container definition using the classes in ``sample_beans``."""
    return write_file(
        "beans.yaml",
        """
        beans:
          datastore:
            class: sample_beans:SqlDatastore
            kwargs:
              url: sqlite:///test.db
          timeout:
            class: datetime:timedelta
            kwargs: {seconds: 30}
          service:
            class: sample_beans:Service
            args: [{ref: datastore}]
            kwargs:
              timeout: {ref: timeout}
        """,
    )


@pytest.fixture(autouse=True)
def suppress_warnings():
    """Suppress expected warnings during testing."""
    warnings.filterwarnings("ignore", category=ResourceWarning)
    yield
