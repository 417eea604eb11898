"""GitHub releases API.

Published releases are listed page by page from
``/repos/{owner}/{name}/releases``. Records are returned as the API sends
them; conversion to Version happens when the cache is read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bsvm.core.result import Err, Ok, Result
from bsvm.core.structured import StrDict, as_obj_list, as_str_dict
from bsvm.tools.http import HttpError

if TYPE_CHECKING:
    from bsvm.tools.http import HttpClient

__all__ = ["RELEASES_PAGE_SIZE", "fetch_releases", "releases_url"]

RELEASES_PAGE_SIZE = 100

# Stop runaway pagination if the API keeps returning full pages.
_MAX_PAGES = 50


def releases_url(repo: str, page: int) -> str:
    """URL of one page of the releases listing for ``owner/name``."""
    return (
        f"https://api.github.com/repos/{repo}/releases"
        f"?per_page={RELEASES_PAGE_SIZE}&page={page}"
    )


def fetch_releases(http: HttpClient, repo: str) -> Result[list[StrDict], HttpError]:
    """Fetch every published release of ``repo``.

    Args:
        http: HTTP client to use
        repo: Repository in "owner/name" format

    Returns:
        Ok with the raw release objects (newest first, as GitHub orders
        them), or Err with the first HttpError encountered.
    """
    releases: list[StrDict] = []

    for page in range(1, _MAX_PAGES + 1):
        url = releases_url(repo, page)
        result = http.get_json(url)
        if isinstance(result, Err):
            return result

        items = as_obj_list(result.value)
        if items is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON array"))

        for item in items:
            record = as_str_dict(item)
            if record is not None:
                releases.append(record)

        if len(items) < RELEASES_PAGE_SIZE:
            break

    return Ok(releases)
