"""Shared utilities for all CLI command modules.

Provides the Rich console instance and the options every command
that talks to the registry accepts.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from ..config import RegistryConfig, load_config

console = Console()

target_option = click.option(
    "--target",
    default=".",
    type=click.Path(file_okay=False),
    help="Project root that holds .agent/skills.",
)
registry_option = click.option(
    "--registry",
    default=None,
    help="Registry base URL (overrides config and SKILLSYNC_REGISTRY_URL).",
)


def resolve_config(
    target: Path,
    registry: Optional[str] = None,
    concurrency: Optional[int] = None,
) -> RegistryConfig:
    """Load config for target, exiting with a message on bad overrides."""
    try:
        return load_config(
            target,
            overrides={"registry_url": registry, "concurrency_limit": concurrency},
        )
    except ValueError as exc:
        console.print(f"[bold red]Invalid configuration:[/] {exc}")
        sys.exit(2)
