"""Tests for bsvm.services.releases."""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path

from bsvm.core.result import Err, Ok
from bsvm.core.version import Version
from bsvm.services.releases import CacheError, ReleaseCache, refresh_cache
from bsvm.tools.github import releases_url
from bsvm.tools.http import HttpError, MockHttpClient

REPO = "blankstorm/blankstorm"


def _write(path: Path, data: object) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestLoad:
    def test_converts_records(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(
            path,
            [
                {"tag_name": "v2.0.0", "name": "Two", "created_at": "2023-06-01T00:00:00Z"},
                {"tag_name": "v1.0.0", "name": "One", "created_at": "2023-01-01T00:00:00Z"},
            ],
        )

        result = ReleaseCache(path).load()

        assert result == Ok(
            [
                Version(tag="v2.0.0", name="Two", time=datetime(2023, 6, 1, tzinfo=UTC)),
                Version(tag="v1.0.0", name="One", time=datetime(2023, 1, 1, tzinfo=UTC)),
            ]
        )

    def test_skips_bad_records(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(path, [{"tag_name": "v1"}, {"name": "no tag"}, "junk"])

        assert ReleaseCache(path).load() == Ok([Version(tag="v1")])

    def test_missing(self, tmp_path: Path) -> None:
        result = ReleaseCache(tmp_path / "none.json").load()

        assert isinstance(result, Err)
        assert result.error.message == "release cache not found"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        path.write_text("[{", encoding="utf-8")

        assert isinstance(ReleaseCache(path).load(), Err)

    def test_not_an_array(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(path, {"tag_name": "v1"})

        result = ReleaseCache(path).load()

        assert isinstance(result, Err)
        assert "JSON array" in result.error.message


class TestStaleness:
    def test_missing_is_stale(self, tmp_path: Path) -> None:
        cache = ReleaseCache(tmp_path / "releases.json")
        assert cache.age_seconds() is None
        assert cache.is_stale()

    def test_fresh_and_old(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(path, [])
        mtime = path.stat().st_mtime
        cache = ReleaseCache(path)

        assert not cache.is_stale(max_age=3600, now=mtime + 60)
        assert cache.is_stale(max_age=3600, now=mtime + 7200)

    def test_old_file_on_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(path, [])
        os.utime(path, (0, 0))

        assert ReleaseCache(path).is_stale()


class TestRefresh:
    def test_writes_raw_records(self, tmp_path: Path) -> None:
        records = [{"tag_name": "v1.0.0", "name": "One", "created_at": "2023-01-01T00:00:00Z"}]
        client = MockHttpClient()
        client.set_json(releases_url(REPO, 1), records)
        cache = ReleaseCache(tmp_path / "cache" / "releases.json")

        assert refresh_cache(cache, client, REPO) == Ok(1)

        assert json.loads(cache.path.read_text(encoding="utf-8")) == records

    def test_fetch_failure_keeps_old_cache(self, tmp_path: Path) -> None:
        path = tmp_path / "releases.json"
        _write(path, [{"tag_name": "v0"}])
        client = MockHttpClient()
        client.set_json(releases_url(REPO, 1), HttpError(url="u", status=0, message="offline"))

        result = refresh_cache(ReleaseCache(path), client, REPO)

        assert isinstance(result, Err)
        assert isinstance(result.error, HttpError)
        assert ReleaseCache(path).load() == Ok([Version(tag="v0")])

    def test_save_failure(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a dir", encoding="utf-8")
        client = MockHttpClient()
        client.set_json(releases_url(REPO, 1), [])

        result = refresh_cache(ReleaseCache(blocker / "releases.json"), client, REPO)

        assert isinstance(result, Err)
        assert isinstance(result.error, CacheError)
