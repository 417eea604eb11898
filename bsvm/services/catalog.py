"""Version catalog: one merged list of every known release.

Two sources describe releases independently. The release cache knows what
was published; the local clone knows which tags exist and, for annotated
tags, their message and date. Either can be missing or stale, so the
catalog is built from whatever is available and never fails as a whole.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bsvm.core.result import Err, Ok, Result
from bsvm.core.version import Version, merge_version, sort_key
from bsvm.git.repository import GitError, TagObject

if TYPE_CHECKING:
    from bsvm.git.repository import Repository
    from bsvm.output.console import ConsoleProtocol
    from bsvm.services.releases import ReleaseCache

__all__ = ["CatalogBuild", "SkippedTag", "TagReader", "build_catalog", "load_catalog"]

type TagReader = Callable[[str], Result[TagObject, GitError]]


@dataclass(frozen=True, slots=True)
class SkippedTag:
    """A tag whose object could not be read."""

    tag: str
    reason: str


def _empty_skipped() -> list[SkippedTag]:
    return []


@dataclass(slots=True)
class CatalogBuild:
    """Result of a catalog build.

    Attributes:
        versions: Merged versions, oldest first.
        skipped: Tags dropped because their object could not be read.
    """

    versions: list[Version]
    skipped: list[SkippedTag] = field(default_factory=_empty_skipped)


def _read(read_tag: TagReader, tag: str) -> Result[TagObject, str]:
    try:
        result = read_tag(tag)
    except Exception as e:  # noqa: BLE001
        return Err(f"{type(e).__name__}: {e}")
    match result:
        case Err(error):
            return Err(error.message)
        case Ok(obj):
            return Ok(obj)


def build_catalog(
    release_records: Iterable[Version],
    tag_names: Iterable[str],
    read_tag: TagReader,
) -> CatalogBuild:
    """Merge published releases and local tags into one list.

    Rules:
    - Release records seed the catalog; the release source is authoritative
      for the fields it provides.
    - An annotated tag fills the unset fields of the matching record, or is
      appended when no record exists.
    - A lightweight tag marks the matching record as local, or is appended
      as an "Unknown" local record.
    - A tag whose object cannot be read is skipped; the rest continue.

    Returns:
        CatalogBuild with versions sorted oldest first (no time sorts first).
    """
    by_tag: dict[str, Version] = {}
    order: list[str] = []

    def _put(version: Version) -> None:
        existing = by_tag.get(version.tag)
        if existing is None:
            by_tag[version.tag] = version
            order.append(version.tag)
        else:
            by_tag[version.tag] = merge_version(existing, version)

    for release in release_records:
        _put(release)

    skipped: list[SkippedTag] = []
    for tag in tag_names:
        read = _read(read_tag, tag)
        if isinstance(read, Err):
            skipped.append(SkippedTag(tag=tag, reason=read.error))
            continue

        obj = read.value
        existing = by_tag.get(tag)
        if obj.is_annotated:
            _put(Version.from_tag(obj))
        elif existing is not None:
            by_tag[tag] = existing.mark_local()
        else:
            _put(Version.unknown(tag))

    versions = sorted((by_tag[tag] for tag in order), key=sort_key)
    return CatalogBuild(versions=versions, skipped=skipped)


def load_catalog(
    cache: ReleaseCache,
    repo: Repository,
    console: ConsoleProtocol,
) -> CatalogBuild:
    """Build the catalog from the release cache and the local clone.

    Either source failing degrades to the other; both failing yields an
    empty catalog.
    """
    releases: list[Version] = []
    match cache.load():
        case Ok(loaded):
            releases = loaded
        case Err(error):
            console.debug(f"release cache unavailable: {error.message}")

    tags: list[str] = []
    if repo.exists():
        match repo.list_tags():
            case Ok(listed):
                tags = listed
            case Err(error):
                console.debug(f"local tags unavailable: {error.message}")
    else:
        console.debug(f"no local clone at {repo.path}")

    built = build_catalog(releases, tags, repo.read_tag)
    for skipped in built.skipped:
        console.debug(f"skipped tag {skipped.tag}: {skipped.reason}")
    return built
