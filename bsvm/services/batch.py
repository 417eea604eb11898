"""Per-version outcomes of a batch install or uninstall."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from bsvm.core.result import Err, Ok, Result
from bsvm.core.version import Version

__all__ = ["BatchReport", "VersionOutcome", "unique_by_tag"]


@dataclass(frozen=True, slots=True)
class VersionOutcome[T, E]:
    version: Version
    result: Result[T, E]

    @property
    def ok(self) -> bool:
        return isinstance(self.result, Ok)


@dataclass(frozen=True, slots=True)
class BatchReport[T, E]:
    """Outcomes in processing order. A failure never stops the batch."""

    outcomes: tuple[VersionOutcome[T, E], ...] = ()

    @property
    def succeeded(self) -> list[VersionOutcome[T, E]]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[VersionOutcome[T, E]]:
        return [o for o in self.outcomes if isinstance(o.result, Err)]

    @property
    def all_ok(self) -> bool:
        return not self.failed


def unique_by_tag(versions: Iterable[Version]) -> list[Version]:
    """Drop repeated tags, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[Version] = []
    for version in versions:
        if version.tag in seen:
            continue
        seen.add(version.tag)
        unique.append(version)
    return unique
