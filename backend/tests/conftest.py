"""Root conftest — shared test configuration."""

import os

import pytest

from transwarp.config import Settings

# Ensure tests never pick up a production environment from the shell
os.environ["ENVIRONMENT"] = "development"


@pytest.fixture
def make_settings(tmp_path):
    """Settings factory writing uploads under tmp_path, jitter off by default."""
    def _make(**overrides) -> Settings:
        values = {
            "upload_dir": str(tmp_path / "uploads"),
            "api_jitter_ms": 0,
            "log_format": "text",
        }
        values.update(overrides)
        return Settings(**values)
    return _make
