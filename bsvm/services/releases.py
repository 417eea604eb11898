"""Release cache: the locally persisted list of published releases.

The cache is the JSON array returned by the GitHub releases API, written
as-is. It is read on every command and refreshed when it is older than an
hour.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from bsvm.core.result import Err, Ok, Result
from bsvm.core.structured import StrDict, as_obj_list, as_str_dict
from bsvm.core.version import Version
from bsvm.platform.files import atomic_write_text
from bsvm.tools.github import fetch_releases

if TYPE_CHECKING:
    from bsvm.tools.http import HttpClient, HttpError

__all__ = ["CACHE_MAX_AGE_SECONDS", "CacheError", "ReleaseCache", "refresh_cache"]

CACHE_MAX_AGE_SECONDS = 3600.0


@dataclass(frozen=True, slots=True)
class CacheError:
    """The release cache could not be read or written."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.path})"


class ReleaseCache:
    """Reads and writes the release cache file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def age_seconds(self, now: float | None = None) -> float | None:
        """Seconds since the cache was last written, None if missing."""
        try:
            mtime = self.path.stat().st_mtime
        except OSError:
            return None
        return (now if now is not None else time.time()) - mtime

    def is_stale(self, max_age: float = CACHE_MAX_AGE_SECONDS, now: float | None = None) -> bool:
        age = self.age_seconds(now)
        return age is None or age > max_age

    def load(self) -> Result[list[Version], CacheError]:
        """Read the cache and convert each release record to a Version.

        Records that are not objects or have no ``tag_name`` are skipped.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(CacheError(self.path, "release cache not found"))
        except (OSError, UnicodeDecodeError) as e:
            return Err(CacheError(self.path, f"cannot read release cache: {e}"))

        try:
            data: object = json.loads(text)
        except json.JSONDecodeError as e:
            return Err(CacheError(self.path, f"release cache is not valid JSON: {e}"))

        items = as_obj_list(data)
        if items is None:
            return Err(CacheError(self.path, "release cache must be a JSON array"))

        versions: list[Version] = []
        for item in items:
            record = as_str_dict(item)
            if record is None:
                continue
            version = Version.from_release(record)
            if version is not None:
                versions.append(version)
        return Ok(versions)

    def save(self, records: list[StrDict]) -> Result[None, CacheError]:
        try:
            atomic_write_text(self.path, json.dumps(records, indent=2))
        except (OSError, TypeError, ValueError) as e:
            return Err(CacheError(self.path, f"cannot write release cache: {e}"))
        return Ok(None)


def refresh_cache(
    cache: ReleaseCache,
    http: HttpClient,
    repo: str,
) -> Result[int, HttpError | CacheError]:
    """Fetch the release list and overwrite the cache.

    Returns:
        Ok with the number of releases written.
    """
    fetched = fetch_releases(http, repo)
    if isinstance(fetched, Err):
        return fetched

    saved = cache.save(fetched.value)
    if isinstance(saved, Err):
        return saved
    return Ok(len(fetched.value))
