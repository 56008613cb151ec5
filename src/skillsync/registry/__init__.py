"""
Registry synchronization -- manifest in, verified files out.

The registry publishes one flat file list per release. Every file is
checked against its declared sha256 before it is written, and the
local version marker only moves once the whole pass has finished.
"""

from .engine import Synchronizer
from .errors import (
    FetchError,
    HashMismatch,
    MalformedManifest,
    SyncError,
    UnreachableRegistry,
    WriteError,
)
from .fetcher import FileFetcher, create_session
from .integrity import HASH_ALGORITHM, IntegrityVerifier
from .manifest import ManifestSource, parse_manifest
from .target import TargetTree
from .version_store import VERSION_FILE, LocalVersionStore

__all__ = [
    "Synchronizer",
    "ManifestSource",
    "parse_manifest",
    "LocalVersionStore",
    "VERSION_FILE",
    "IntegrityVerifier",
    "HASH_ALGORITHM",
    "FileFetcher",
    "create_session",
    "TargetTree",
    "SyncError",
    "UnreachableRegistry",
    "MalformedManifest",
    "FetchError",
    "HashMismatch",
    "WriteError",
]
