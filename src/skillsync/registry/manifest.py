"""
Remote manifest retrieval and strict decoding.

The manifest is fetched once per pass. A body that does not decode
into Manifest is rejected outright; nothing partially populated is
ever handed to the engine.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from ..models import Manifest
from .errors import MalformedManifest, UnreachableRegistry
from .fetcher import create_session, is_success

logger = logging.getLogger("skillsync.registry.manifest")


def parse_manifest(body: bytes) -> Manifest:
    """Decode raw manifest bytes.

    Raises:
        MalformedManifest: If the body is not JSON or lacks required fields.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedManifest(f"manifest is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedManifest("manifest must be a JSON object")

    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise MalformedManifest(f"invalid manifest: {problems}") from exc


class ManifestSource:
    """Retrieves the current registry manifest.

    Args:
        url: Full manifest URL.
        session: HTTP session.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ) -> None:
        self.url = url
        self.session = session or create_session(pool_size=1)
        self.timeout = timeout

    def fetch(self) -> Manifest:
        """Fetch and decode the manifest. No retries.

        Raises:
            UnreachableRegistry: On network failure or non-2xx status.
            MalformedManifest: On an undecodable body.
        """
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UnreachableRegistry(self.url, reason=str(exc)) from exc

        if not is_success(resp.status_code):
            raise UnreachableRegistry(self.url, status=resp.status_code)

        manifest = parse_manifest(resp.content)
        logger.info(
            "Manifest %s version %s lists %d file(s)",
            manifest.name or self.url,
            manifest.version,
            len(manifest.files),
        )
        return manifest
