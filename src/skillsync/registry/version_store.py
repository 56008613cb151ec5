"""
Local version marker persistence.

The marker is a tiny JSON document under the skills directory:

    .agent/skills/_version.json  ->  {"version": "1.2.0"}

An unreadable or corrupt marker reads as "nothing installed" so the
next update re-syncs instead of blocking the user.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .. import SKILLS_DIR
from .target import TargetTree

logger = logging.getLogger("skillsync.registry.version_store")

VERSION_FILE = f"{SKILLS_DIR}/_version.json"


class LocalVersionStore:
    """Reads and writes the installed registry version."""

    def __init__(self, target: TargetTree, marker_path: str = VERSION_FILE) -> None:
        self.target = target
        self.marker_path = marker_path

    @property
    def path(self) -> Path:
        return self.target.resolve(self.marker_path)

    def read(self) -> Optional[str]:
        """Return the stored version, or None if absent or unreadable."""
        path = self.path
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable version marker %s: %s", path, exc)
            return None

        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(version, str) or not version:
            logger.warning("Version marker %s has no usable version", path)
            return None
        return version

    def write(self, version: str) -> None:
        """Replace the marker with version.

        Raises:
            WriteError: If the marker cannot be written.
        """
        payload = json.dumps({"version": version}, indent=2).encode("utf-8")
        self.target.write_bytes(self.marker_path, payload)
        logger.debug("Version marker set to %s", version)
