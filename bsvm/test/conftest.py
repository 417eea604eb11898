from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from bsvm.core.config import Config


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Config whose paths all live under tmp_path."""

    def _make(**overrides: object) -> Config:
        values: dict[str, object] = {
            "install_dir": tmp_path / "versions",
            "git_dir": tmp_path / "clone",
            "cache_path": tmp_path / "releases.json",
        }
        values.update(overrides)
        return Config(**values)  # type: ignore[arg-type]

    return _make
