r"""
Synchronizer -- brings the local skill tree up to the registry release.

One pass:

    fetch manifest -> compare marker --(equal)--> UpToDate
                                     \--(differs)--> transfer every file
                                                     (bounded pool)
                                                  -> write marker
                                                  -> Reconciled

Each transfer unit runs fetch -> verify -> write for one file and
reports a TransferOutcome. Unit failures never abort the pass, and the
marker is written only after every unit has finished.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from ..config import RegistryConfig
from ..models import (
    FailureReason,
    Manifest,
    ManifestFile,
    SyncReport,
    TransferOutcome,
    UpdateStatus,
)
from .errors import FetchError, HashMismatch, WriteError
from .fetcher import FileFetcher, create_session
from .integrity import IntegrityVerifier
from .manifest import ManifestSource
from .target import TargetTree
from .version_store import LocalVersionStore

logger = logging.getLogger("skillsync.registry.engine")


class Synchronizer:
    """Orchestrates one registry synchronization pass.

    Collaborators default to HTTP-backed implementations built from
    the config; tests inject fakes for any of them.

    Args:
        config: Registry location and concurrency limit.
        target_root: Project root the registry paths install under.
        manifest_source: Supplies the Manifest.
        fetcher: Supplies file bytes by registry path.
        version_store: Reads and writes the local version marker.
        verifier: Checks bytes against declared digests.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        target_root: Optional[Path] = None,
        *,
        manifest_source: Optional[ManifestSource] = None,
        fetcher: Optional[FileFetcher] = None,
        version_store: Optional[LocalVersionStore] = None,
        verifier: Optional[IntegrityVerifier] = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self.target = TargetTree(target_root or Path.cwd())

        session = None
        if manifest_source is None or fetcher is None:
            session = create_session(pool_size=self.config.concurrency_limit)

        self.manifest_source = manifest_source or ManifestSource(
            self.config.manifest_url, session=session, timeout=self.config.timeout,
        )
        self.fetcher = fetcher or FileFetcher(
            self.config.base_url, session=session, timeout=self.config.timeout,
        )
        self.version_store = version_store or LocalVersionStore(self.target)
        self.verifier = verifier or IntegrityVerifier()

    def check(self) -> UpdateStatus:
        """Compare local and remote versions without transferring anything.

        Raises:
            UnreachableRegistry: If the manifest cannot be fetched.
            MalformedManifest: If the manifest cannot be decoded.
        """
        manifest = self.manifest_source.fetch()
        return UpdateStatus(
            local_version=self.version_store.read(),
            remote_version=manifest.version,
        )

    def synchronize(self) -> SyncReport:
        """Run one synchronization pass.

        Returns:
            SyncReport with one outcome per manifest file, or no
            outcomes when the local version already matches.

        Raises:
            UnreachableRegistry: Manifest fetch failed; nothing touched.
            MalformedManifest: Manifest undecodable; nothing touched.
            WriteError: Files transferred but the marker could not be saved.
        """
        manifest = self.manifest_source.fetch()
        local_version = self.version_store.read()

        if local_version == manifest.version:
            logger.info("Already at version %s", local_version)
            return SyncReport(
                version_before=local_version,
                version_after=local_version,
                outcomes=[],
            )

        logger.info(
            "Updating from %s to %s (%d files)",
            local_version or "not installed",
            manifest.version,
            len(manifest.files),
        )
        outcomes = self._transfer_all(manifest)

        self.version_store.write(manifest.version)

        failures = sum(1 for o in outcomes if not o.success)
        if failures:
            logger.warning(
                "Version %s recorded with %d of %d file(s) failed",
                manifest.version, failures, len(outcomes),
            )
        return SyncReport(
            version_before=local_version,
            version_after=manifest.version,
            outcomes=outcomes,
        )

    def _transfer_all(self, manifest: Manifest) -> list[TransferOutcome]:
        if not manifest.files:
            return []
        workers = min(self.config.concurrency_limit, len(manifest.files))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="skillsync-transfer",
        ) as pool:
            return list(pool.map(self._transfer_one, manifest.files))

    def _transfer_one(self, entry: ManifestFile) -> TransferOutcome:
        """Fetch, verify, then write a single file."""
        try:
            data = self.fetcher.fetch(entry.path)
        except FetchError as exc:
            logger.warning("Fetch failed for %s: %s", entry.path, exc.detail)
            return TransferOutcome.failed(entry.path, FailureReason.HTTP_ERROR, exc.detail)

        try:
            self.verifier.require(entry.path, data, entry.sha256)
        except HashMismatch as exc:
            logger.warning(
                "Integrity check failed for %s: expected %s, got %s",
                entry.path, exc.expected, exc.actual,
            )
            return TransferOutcome.failed(
                entry.path, FailureReason.HASH_MISMATCH, f"sha256 {exc.actual[:12]}",
            )

        try:
            self.target.write_bytes(entry.path, data)
        except WriteError as exc:
            logger.warning("Write failed for %s: %s", entry.path, exc.reason)
            return TransferOutcome.failed(entry.path, FailureReason.WRITE_ERROR, exc.reason)

        logger.debug("Installed %s (%d bytes)", entry.path, len(data))
        return TransferOutcome.ok(entry.path)
