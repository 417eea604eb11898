"""Map user queries to catalog versions.

A query matches every version whose tag or name contains it, so
``bsvm install 1.2`` picks up both ``v1.2.0`` and a release named
"Release 1.2". Matching is case sensitive.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from bsvm.core.version import Version

__all__ = ["Resolution", "matches", "resolve", "resolve_all"]


@dataclass(frozen=True, slots=True)
class Resolution:
    """Versions selected by a set of queries.

    Attributes:
        versions: Matches for each query, in query order. A version matched
            by two queries appears twice.
        unmatched: Queries that matched nothing.
    """

    versions: tuple[Version, ...]
    unmatched: tuple[str, ...] = ()


def matches(query: str, version: Version) -> bool:
    if query in version.tag:
        return True
    return version.name is not None and query in version.name


def resolve(queries: Iterable[str], catalog: Sequence[Version]) -> Resolution:
    selected: list[Version] = []
    unmatched: list[str] = []

    for query in queries:
        found = [v for v in catalog if matches(query, v)]
        if not found:
            unmatched.append(query)
        selected.extend(found)

    return Resolution(versions=tuple(selected), unmatched=tuple(unmatched))


def resolve_all(catalog: Sequence[Version]) -> Resolution:
    """The ``--all`` selection: the catalog unchanged."""
    return Resolution(versions=tuple(catalog))
