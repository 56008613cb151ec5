"""Shared test fixtures for skillsync."""

from __future__ import annotations

import hashlib
import json
import threading
import time
from pathlib import Path
from typing import Iterable, Optional

import pytest

from skillsync.config import RegistryConfig

REGISTRY_URL = "https://registry.test/main"
MANIFEST_URL = f"{REGISTRY_URL}/prompt-manifest.json"


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeResponse:
    """Just enough of requests.Response for the registry code."""

    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content


class FakeSession:
    """Thread-safe stand-in for requests.Session.

    Routes map a URL to ``(status, body)`` or to an exception to raise.
    Unknown URLs answer 404. Tracks how many requests are in flight.
    """

    def __init__(self, routes: Optional[dict] = None, delay: float = 0.0):
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def _respond(self, method: str, url: str) -> FakeResponse:
        with self._lock:
            self.calls.append((method, url))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            route = self.routes.get(url)
            if route is None:
                return FakeResponse(404)
            if isinstance(route, BaseException):
                raise route
            status, body = route
            return FakeResponse(status, body)
        finally:
            with self._lock:
                self.in_flight -= 1

    def get(self, url, timeout=None):
        return self._respond("GET", url)

    def head(self, url, timeout=None, allow_redirects=False):
        return self._respond("HEAD", url)

    def urls(self, method: str = "GET") -> list[str]:
        return [u for m, u in self.calls if m == method]


class FakeRegistry:
    """A registry served entirely from a FakeSession."""

    def __init__(self, session: FakeSession):
        self.session = session

    def config(self, **overrides) -> RegistryConfig:
        return RegistryConfig(registry_url=REGISTRY_URL, **overrides)

    def publish(
        self,
        version: str,
        files: dict[str, bytes],
        *,
        bad_hash: Iterable[str] = (),
        missing: Iterable[str] = (),
    ) -> dict:
        """Serve a manifest plus file bodies.

        Paths in ``bad_hash`` are listed with a digest of other bytes;
        paths in ``missing`` are listed but answer 404.
        """
        bad_hash, missing = set(bad_hash), set(missing)
        entries = []
        for path, data in files.items():
            declared = sha256_hex(b"not-" + data) if path in bad_hash else sha256_hex(data)
            entries.append({"path": path, "sha256": declared, "size": len(data)})
            if path in missing:
                self.session.routes.pop(f"{REGISTRY_URL}/{path}", None)
            else:
                self.session.routes[f"{REGISTRY_URL}/{path}"] = (200, data)

        manifest = {
            "name": "oh-my-antigravity",
            "version": version,
            "releaseDate": "2026-01-15",
            "repository": "first-fluke/oh-my-antigravity",
            "files": entries,
        }
        self.session.routes[MANIFEST_URL] = (200, json.dumps(manifest).encode("utf-8"))
        return manifest

    def file_gets(self) -> list[str]:
        return [u for u in self.session.urls("GET") if u != MANIFEST_URL]


@pytest.fixture
def target_root(tmp_path: Path) -> Path:
    """An empty project directory to install into."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def registry(fake_session: FakeSession) -> FakeRegistry:
    return FakeRegistry(fake_session)


@pytest.fixture
def skill_files() -> dict[str, bytes]:
    """Three registry files, as in a small release."""
    return {
        ".agent/skills/frontend-agent/SKILL.md": b"# Frontend agent\n",
        ".agent/skills/backend-agent/SKILL.md": b"# Backend agent\n",
        ".agent/skills/_shared/skill-routing.md": b"route by keyword\n",
    }
