"""Typed configuration and the key/value store it is read from.

The store is a flat JSON object on disk (``~/.bsdk.config`` by default).
``Config`` is built from it once per process, merged over defaults, and
passed explicitly to every service that needs a path.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from bsvm.platform.files import atomic_write_text

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str

__all__ = [
    "Config",
    "ConfigError",
    "ConfigStore",
    "KNOWN_KEYS",
    "default_config_path",
    "load_config",
]

CONFIG_ENV_VAR = "BSVM_CONFIG"

DEFAULT_HOME = Path("~/.bsvm")
DEFAULT_REPO = "blankstorm/blankstorm"
DEFAULT_REPO_URL = "https://github.com/blankstorm/blankstorm.git"
DEFAULT_BRANCH = "main"
DEFAULT_PACKAGE_MANAGER = "npm"

KNOWN_KEYS: tuple[str, ...] = (
    "install_dir",
    "git_dir",
    "cache_path",
    "repo",
    "repo_url",
    "branch",
    "package_manager",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the config store cannot be read or written."""

    message: str
    path: Path | None = None


def default_config_path() -> Path:
    """Config store location, honouring ``BSVM_CONFIG``."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".bsdk.config"


class ConfigStore:
    """Flat key/value persistence backed by a JSON object file.

    Values are always strings. A missing file reads as an empty store and
    is created on the first ``set``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Result[dict[str, str], ConfigError]:
        if not self.path.exists():
            return Ok({})

        try:
            data_obj: object = json.loads(self.path.read_text(encoding="utf-8"))
        except PermissionError:
            return Err(ConfigError(f"Permission denied reading: {self.path}", path=self.path))
        except (OSError, UnicodeDecodeError) as e:
            return Err(ConfigError(f"Error reading config: {e}", path=self.path))
        except json.JSONDecodeError as e:
            return Err(ConfigError(f"Invalid JSON in config: {e}", path=self.path))

        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a JSON object", path=self.path))

        return Ok({k: str(v) for k, v in data.items() if v is not None})

    def get(self, key: str) -> Result[str | None, ConfigError]:
        return self.load().map(lambda values: values.get(key))

    def set(self, key: str, value: str) -> Result[None, ConfigError]:
        loaded = self.load()
        if isinstance(loaded, Err):
            return loaded

        values = loaded.value
        values[key] = value
        try:
            atomic_write_text(self.path, json.dumps(values, indent=2) + "\n")
        except OSError as e:
            return Err(ConfigError(f"Error writing config: {e}", path=self.path))
        return Ok(None)

    def items(self) -> Result[list[tuple[str, str]], ConfigError]:
        return self.load().map(lambda values: sorted(values.items()))


def _path(data: Mapping[str, object], key: str, default: Path) -> Path:
    value = get_str(data, key)
    return Path(value).expanduser() if value else default.expanduser()


@dataclass(frozen=True, slots=True)
class Config:
    """Resolved configuration.

    Attributes:
        install_dir: Root of the per-tag install directories.
        git_dir: Local clone of the project repository.
        cache_path: Release cache (JSON array of release records).
        repo: GitHub ``owner/name`` used for the releases API.
        repo_url: Clone URL for ``git_dir``.
        branch: Branch fast-forwarded by ``bsvm update``.
        package_manager: Executable used for dependency install and deploy.
    """

    install_dir: Path = field(default_factory=lambda: (DEFAULT_HOME / "versions").expanduser())
    git_dir: Path = field(default_factory=lambda: (DEFAULT_HOME / "repo").expanduser())
    cache_path: Path = field(
        default_factory=lambda: (DEFAULT_HOME / "releases.json").expanduser()
    )
    repo: str = DEFAULT_REPO
    repo_url: str = DEFAULT_REPO_URL
    branch: str = DEFAULT_BRANCH
    package_manager: str = DEFAULT_PACKAGE_MANAGER

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> Config:
        """Create Config from store values, falling back to defaults."""
        return cls(
            install_dir=_path(data, "install_dir", DEFAULT_HOME / "versions"),
            git_dir=_path(data, "git_dir", DEFAULT_HOME / "repo"),
            cache_path=_path(data, "cache_path", DEFAULT_HOME / "releases.json"),
            repo=get_str(data, "repo") or DEFAULT_REPO,
            repo_url=get_str(data, "repo_url") or DEFAULT_REPO_URL,
            branch=get_str(data, "branch") or DEFAULT_BRANCH,
            package_manager=get_str(data, "package_manager") or DEFAULT_PACKAGE_MANAGER,
        )


def load_config(store: ConfigStore) -> Result[Config, ConfigError]:
    """Load the store and merge it over the defaults."""
    loaded = store.load()
    if isinstance(loaded, Err):
        return loaded
    data: StrDict = dict(loaded.value)
    return Ok(Config.from_mapping(data))
