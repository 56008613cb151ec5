"""
Registry error taxonomy.

Fatal errors abort a synchronization pass before any transfer:
UnreachableRegistry, MalformedManifest, and a WriteError raised
while persisting the version marker.

Per-file errors never leave the pass; the engine records them as
failed TransferOutcomes: FetchError, HashMismatch, WriteError.
"""

from __future__ import annotations

from typing import Optional


class SyncError(RuntimeError):
    """Base class for every registry synchronization error."""


class UnreachableRegistry(SyncError):
    """The manifest endpoint could not be reached or answered non-2xx."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        detail = f"HTTP {status}" if status is not None else (reason or "unreachable")
        super().__init__(f"Registry unreachable at {url}: {detail}")


class MalformedManifest(SyncError):
    """The manifest body does not decode into the required shape."""


class FetchError(SyncError):
    """A single registry file could not be retrieved."""

    def __init__(self, path: str, status: Optional[int] = None, reason: str = ""):
        self.path = path
        self.status = status
        self.reason = reason
        super().__init__(f"{path}: {self.detail}")

    @property
    def detail(self) -> str:
        """Short description used in transfer outcomes."""
        if self.status is not None:
            return f"HTTP {self.status}"
        return self.reason or "network error"


class HashMismatch(SyncError):
    """Retrieved bytes do not match the digest declared in the manifest."""

    def __init__(self, path: str, expected: str, actual: str):
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{path}: sha256 mismatch (expected {expected[:12]}, got {actual[:12]})"
        )


class WriteError(SyncError):
    """A file or the version marker could not be written under the target."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}" if reason else path)
