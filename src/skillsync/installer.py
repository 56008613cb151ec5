"""
Per-skill bundle installer.

Installs individual skill directories straight from the registry's
skills tree, outside the manifest flow. There is no manifest here and
therefore no integrity check: files are discovered by probing, and
files that fail to download are skipped.

Layout written under the target root:

    .agent/skills/
    ├── _shared/
    │   └── *.md
    └── <skill>/
        ├── SKILL.md
        └── resources/*.md   (whichever exist upstream)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from . import SKILLS_DIR
from .catalog import get_skill
from .config import RegistryConfig
from .registry.errors import FetchError, WriteError
from .registry.fetcher import FileFetcher, create_session
from .registry.target import TargetTree

logger = logging.getLogger("skillsync.installer")

SKILL_ENTRY = "SKILL.md"

RESOURCE_FILES = (
    "resources/execution-protocol.md",
    "resources/tech-stack.md",
    "resources/checklist.md",
    "resources/templates.md",
    "resources/error-playbook.md",
)

SHARED_DIR = "_shared"
SHARED_FILES = (
    "reasoning-templates.md",
    "clarification-protocol.md",
    "context-loading.md",
    "skill-routing.md",
)


@dataclass
class InstallResult:
    """What happened to one bundle.

    Attributes:
        skill: Bundle name (``_shared`` for the shared documents).
        written: Bundle-relative files now on disk.
        skipped: Bundle-relative files that could not be installed.
    """

    skill: str
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped and bool(self.written)


class SkillInstaller:
    """Downloads skill bundles into a target tree.

    Args:
        config: Registry configuration (skills_url is used).
        target_root: Project root; bundles land in .agent/skills/.
        fetcher: Fetcher rooted at the registry skills directory.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        target_root: Optional[Path] = None,
        fetcher: Optional[FileFetcher] = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self.target = TargetTree(target_root or Path.cwd())
        self.fetcher = fetcher or FileFetcher(
            self.config.skills_url,
            session=create_session(pool_size=1),
            timeout=self.config.timeout,
        )

    @property
    def skills_dir(self) -> Path:
        return self.target.resolve(SKILLS_DIR)

    def discover_files(self, skill: str) -> list[str]:
        """List the bundle files the registry actually publishes.

        SKILL.md is always expected; resource documents are probed.
        """
        files = [SKILL_ENTRY]
        for resource in RESOURCE_FILES:
            if self.fetcher.exists(f"{skill}/{resource}"):
                files.append(resource)
        return files

    def _install_files(self, bundle: str, files: Iterable[str]) -> InstallResult:
        result = InstallResult(skill=bundle)
        for name in files:
            remote = f"{bundle}/{name}"
            try:
                data = self.fetcher.fetch(remote)
                self.target.write_bytes(f"{SKILLS_DIR}/{remote}", data)
            except (FetchError, WriteError) as exc:
                logger.info("Skipping %s: %s", remote, exc)
                result.skipped.append(name)
                continue
            result.written.append(name)
        return result

    def install_shared(self) -> InstallResult:
        """Install the shared reasoning/routing documents every skill uses."""
        return self._install_files(SHARED_DIR, SHARED_FILES)

    def install_skill(self, skill: str) -> InstallResult:
        """Install one skill bundle.

        Raises:
            KeyError: If the skill is not in the catalog.
        """
        get_skill(skill)
        result = self._install_files(skill, self.discover_files(skill))
        logger.info(
            "Installed %s: %d file(s), %d skipped",
            skill, len(result.written), len(result.skipped),
        )
        return result

    def install(self, skills: Iterable[str]) -> list[InstallResult]:
        """Install shared documents, then each requested skill in order."""
        results = [self.install_shared()]
        for skill in skills:
            results.append(self.install_skill(skill))
        return results
