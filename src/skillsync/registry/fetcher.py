"""
Registry file retrieval.

FileFetcher is the unit of work for parallel transfer: it turns a
registry-relative path into bytes or a FetchError. Network failures
and HTTP failures share that single error type.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from .. import __version__
from .errors import FetchError

logger = logging.getLogger("skillsync.registry.fetcher")

USER_AGENT = f"skillsync/{__version__}"


def create_session(pool_size: int = 10) -> requests.Session:
    """Build an HTTP session whose connection pool fits the worker count.

    Args:
        pool_size: Maximum simultaneous connections per host.

    Returns:
        A configured requests.Session.
    """
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers["User-Agent"] = USER_AGENT
    return session


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class FileFetcher:
    """Fetches raw file bodies relative to a fixed base URL.

    Args:
        base_url: Registry location every path is joined onto.
        session: HTTP session (anything with requests-style get/head).
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or create_session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def fetch(self, path: str) -> bytes:
        """Retrieve one file's bytes.

        Args:
            path: Registry-relative file path.

        Returns:
            The exact response body.

        Raises:
            FetchError: On a non-2xx status or any network failure.
        """
        url = self.url_for(path)
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise FetchError(path, reason=str(exc) or type(exc).__name__) from exc

        if not is_success(resp.status_code):
            logger.debug("GET %s -> %d", url, resp.status_code)
            raise FetchError(path, status=resp.status_code)
        return resp.content

    def exists(self, path: str) -> bool:
        """HEAD-probe a path. Any failure counts as absent."""
        url = self.url_for(path)
        try:
            resp = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            logger.debug("HEAD %s failed: %s", url, exc)
            return False
        return is_success(resp.status_code)
