import os
from pathlib import Path
from typing import Callable

import pytest
from hypothesis import HealthCheck, settings

# HYPOTHESIS_PROFILE=ci runs the property tests harder
settings.register_profile("dev", max_examples=100)
settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture  # type: ignore[misc]
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Writes QUR source to a file under tmp_path and returns its path."""

    def _write(text: str, name: str = "main.qur") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
