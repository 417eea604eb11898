"""JSON over HTTPS for the GitHub REST API.

``HttpClient`` is the seam the release fetch is written against.
``RealHttpClient`` talks to api.github.com with urllib; ``MockHttpClient``
serves canned payloads keyed by URL.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from bsvm import __version__
from bsvm.core.result import Err, Ok, Result

__all__ = ["HttpClient", "HttpError", "MockHttpClient", "RealHttpClient"]

GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"


@dataclass(frozen=True, slots=True)
class HttpError:
    """A request that produced no usable JSON.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and decode errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    def get_json(self, url: str) -> Result[object, HttpError]:
        """Fetch URL and decode the body as JSON (any JSON value)."""
        ...


def _decode(url: str, body: bytes | str) -> Result[object, HttpError]:
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
        data: object = json.loads(text)
    except UnicodeDecodeError as e:
        return Err(HttpError(url=url, status=0, message=f"Decode error: {e}"))
    except json.JSONDecodeError as e:
        return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
    return Ok(data)


class RealHttpClient:
    """urllib client with system certificates and GitHub API headers.

    An optional token is sent as a bearer credential; unauthenticated
    requests are limited to 60 per hour by GitHub.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = f"bsvm/{__version__}",
        token: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.token = token
        self._ssl_context = ssl.create_default_context()

    def headers(self) -> dict[str, str]:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get_json(self, url: str) -> Result[object, HttpError]:
        req = urllib.request.Request(url, headers=self.headers())
        try:
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                body: bytes = response.read()
        except urllib.error.HTTPError as e:
            if e.code == 403 and e.headers.get("X-RateLimit-Remaining") == "0":
                return Err(HttpError(url=url, status=403, message="GitHub API rate limit exceeded"))
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except (ValueError, OSError) as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        return _decode(url, body)


class MockHttpClient:
    """Canned responses for tests.

    Usage:
        client = MockHttpClient()
        client.set_json(releases_url("owner/name", 1), [{"tag_name": "v1"}])
        fetch_releases(client, "owner/name")
    """

    def __init__(self) -> None:
        self._bodies: dict[str, str | HttpError] = {}
        self.calls: list[str] = []

    def set_json(self, url: str, response: object) -> None:
        """Serve ``response`` encoded as JSON, or fail with it if it is an HttpError."""
        self._bodies[url] = response if isinstance(response, HttpError) else json.dumps(response)

    def set_raw(self, url: str, body: str) -> None:
        """Serve a body verbatim (for malformed payloads)."""
        self._bodies[url] = body

    def get_json(self, url: str) -> Result[object, HttpError]:
        self.calls.append(url)
        body = self._bodies.get(url)
        if body is None:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        if isinstance(body, HttpError):
            return Err(body)
        return _decode(url, body)
