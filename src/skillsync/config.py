"""
Registry configuration.

Resolution order, lowest to highest precedence:
    defaults -> <target>/.agent/skillsync.yaml -> SKILLSYNC_* env -> CLI overrides
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from . import DEFAULT_REGISTRY_URL, SKILLS_DIR

logger = logging.getLogger("skillsync.config")

CONFIG_FILE = ".agent/skillsync.yaml"

_ENV_KEYS = {
    "SKILLSYNC_REGISTRY_URL": "registry_url",
    "SKILLSYNC_CONCURRENCY": "concurrency_limit",
    "SKILLSYNC_TIMEOUT": "timeout",
}


class RegistryConfig(BaseModel):
    """Where the registry lives and how hard to hit it."""

    registry_url: str = DEFAULT_REGISTRY_URL
    manifest_name: str = "prompt-manifest.json"
    skills_path: str = SKILLS_DIR
    concurrency_limit: int = Field(default=10, ge=1)
    timeout: float = Field(default=30.0, gt=0)

    @property
    def base_url(self) -> str:
        return self.registry_url.rstrip("/")

    @property
    def manifest_url(self) -> str:
        return f"{self.base_url}/{self.manifest_name.lstrip('/')}"

    @property
    def skills_url(self) -> str:
        return f"{self.base_url}/{self.skills_path.strip('/')}"


def _load_file(config_file: Path) -> dict[str, Any]:
    if not config_file.exists():
        return {}
    try:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    except (yaml.YAMLError, OSError) as exc:
        logger.warning("Failed to load %s: %s", config_file, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", config_file)
        return {}
    return data


def load_config(
    target_root: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> RegistryConfig:
    """Build the effective registry configuration.

    Args:
        target_root: Project root holding .agent/. Defaults to cwd.
        overrides: Explicit values (from CLI flags). None values are ignored.

    Returns:
        RegistryConfig with every layer applied.

    Raises:
        ValueError: If an explicit override is invalid.
    """
    root = Path(target_root or Path.cwd())
    data = _load_file(root / CONFIG_FILE)

    try:
        config = RegistryConfig(**data)
    except ValidationError as exc:
        logger.warning("Invalid registry config in %s: %s", root / CONFIG_FILE, exc)
        config = RegistryConfig()

    env_values = {
        field_name: os.environ[env_key]
        for env_key, field_name in _ENV_KEYS.items()
        if os.environ.get(env_key)
    }
    if env_values:
        try:
            config = RegistryConfig(**{**config.model_dump(), **env_values})
        except ValidationError as exc:
            logger.warning("Ignoring invalid SKILLSYNC_* environment: %s", exc)

    explicit = {k: v for k, v in (overrides or {}).items() if v is not None}
    if explicit:
        try:
            config = RegistryConfig(**{**config.model_dump(), **explicit})
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    return config
