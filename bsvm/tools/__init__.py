"""Network-facing collaborators.

- HTTP client abstraction (http.py)
- GitHub releases API (github.py)
"""

from bsvm.tools.github import RELEASES_PAGE_SIZE, fetch_releases, releases_url
from bsvm.tools.http import (
    HttpClient,
    HttpError,
    MockHttpClient,
    RealHttpClient,
)

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "RELEASES_PAGE_SIZE",
    "fetch_releases",
    "releases_url",
]
