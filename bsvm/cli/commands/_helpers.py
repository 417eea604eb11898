"""Shared helpers for CLI commands."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TYPE_CHECKING, NoReturn

import typer

from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err, Ok
from bsvm.services.catalog import load_catalog
from bsvm.services.releases import refresh_cache
from bsvm.services.resolver import Resolution, resolve, resolve_all
from bsvm.tools.http import HttpClient, RealHttpClient

if TYPE_CHECKING:
    from bsvm.cli.context import CLIContext
    from bsvm.core.version import Version

GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)


def refresh_cache_if_needed(ctx: CLIContext, http: HttpClient | None = None) -> None:
    """Refresh the release cache when missing, stale or forced.

    A failed refresh is reported and the existing cache (if any) is used.
    """
    if ctx.options.cache_no_update:
        return
    cache = ctx.cache
    if not ctx.options.reload_cache and not cache.is_stale():
        return

    ctx.console.debug(f"refreshing release cache from {ctx.config.repo}")
    client = http or RealHttpClient(token=os.environ.get(GITHUB_TOKEN_ENV_VAR))
    match refresh_cache(cache, client, ctx.config.repo):
        case Ok(count):
            ctx.console.debug(f"cached {count} releases in {cache.path}")
        case Err(error):
            if ctx.console.verbose:
                ctx.console.warning(f"Failed to update cache: {error}")
            else:
                ctx.console.warning("Failed to update cache.")


def catalog(ctx: CLIContext) -> list[Version]:
    """Refresh the cache if needed and build the merged catalog."""
    refresh_cache_if_needed(ctx)
    return load_catalog(ctx.cache, ctx.repo, ctx.console).versions


def select_versions(
    ctx: CLIContext,
    queries: Sequence[str],
    *,
    all_: bool,
    versions: Sequence[Version],
) -> Resolution:
    """Resolve queries (or ``--all``), reporting queries that match nothing."""
    if not all_ and not queries:
        ctx.console.error("no versions given (pass version names or --all)")
        exit_with_code(int(ErrorCode.USER_ERROR))

    resolution: Resolution = resolve_all(versions) if all_ else resolve(queries, versions)
    for query in resolution.unmatched:
        ctx.console.error(f"Version not found: {query}")
    return resolution
