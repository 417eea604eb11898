"""The Version record and its merge rule.

A Version is one installable release, keyed by its tag. Two sources can
describe the same tag (the published release list and the local clone's
annotated tags); ``merge_version`` combines them field by field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .structured import get_str

if TYPE_CHECKING:
    from bsvm.git.repository import TagObject

__all__ = [
    "UNKNOWN_NAME",
    "Version",
    "merge_version",
    "parse_timestamp",
    "sort_key",
]

UNKNOWN_NAME = "Unknown"

_OLDEST = datetime.min.replace(tzinfo=UTC)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp, returning None when unusable.

    Naive timestamps are taken as UTC so every Version time is comparable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True, slots=True)
class Version:
    """One release of the managed project.

    Attributes:
        tag: Source-control tag, unique within a catalog.
        name: Display name; None or "Unknown" when not known.
        time: Publication time, used for ordering only.
        is_local: Present in the local clone as a tag without metadata.
    """

    tag: str
    name: str | None = None
    time: datetime | None = None
    is_local: bool = False

    @classmethod
    def from_release(cls, record: Mapping[str, object]) -> Version | None:
        """Convert a published-release record (GitHub shape)."""
        tag = get_str(record, "tag_name")
        if tag is None:
            return None
        return cls(
            tag=tag,
            name=get_str(record, "name"),
            time=parse_timestamp(record.get("created_at")),
        )

    @classmethod
    def from_tag(cls, tag: TagObject) -> Version:
        """Convert an annotated tag object."""
        return cls(tag=tag.tag, name=tag.message or None, time=tag.tagger_time)

    @classmethod
    def unknown(cls, tag: str) -> Version:
        """A tag whose existence is known but nothing else."""
        return cls(tag=tag, name=UNKNOWN_NAME, time=None, is_local=True)

    @property
    def has_name(self) -> bool:
        return self.name is not None and self.name != UNKNOWN_NAME

    @property
    def display_name(self) -> str:
        if not self.has_name:
            return UNKNOWN_NAME
        assert self.name is not None
        return " ".join(self.name.splitlines()).strip()

    def mark_local(self) -> Version:
        return replace(self, is_local=True)


def merge_version(existing: Version, incoming: Version) -> Version:
    """Fill the unset fields of ``existing`` from ``incoming``.

    Fields already populated on ``existing`` win, so the first source to
    describe a tag stays authoritative for what it provides.
    """
    if existing.tag != incoming.tag:
        raise ValueError(f"cannot merge {incoming.tag!r} into {existing.tag!r}")

    name = existing.name if existing.has_name else incoming.name
    if name is None and existing.name is not None:
        name = existing.name

    return Version(
        tag=existing.tag,
        name=name,
        time=existing.time if existing.time is not None else incoming.time,
        is_local=existing.is_local and incoming.is_local,
    )


def sort_key(version: Version) -> tuple[bool, datetime]:
    """Ascending order by time; missing times sort first."""
    if version.time is None:
        return (False, _OLDEST)
    return (True, version.time)
