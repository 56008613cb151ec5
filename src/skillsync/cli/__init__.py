"""
SkillSync CLI — keep .agent/skills in step with the registry.

Each command group lives in its own module and is attached to the
main Click group through a register function.

Entry point: skillsync.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__

LOG_FORMAT = "%(name)s: %(message)s"


def _configure_logging(verbosity: int) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(verbosity, logging.DEBUG)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("skillsync").setLevel(level)


@click.group()
@click.version_option(version=__version__, prog_name="skillsync")
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug).")
def main(verbose: int):
    """SkillSync — multi-agent skills for your IDE.

    Install skill bundles, keep them current with the registry,
    and check that your agent CLIs are ready to use them.
    """
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Register all commands from modular files
# ---------------------------------------------------------------------------

from .update import register_update_commands
from .install import register_install_commands
from .doctor_cmd import register_doctor_commands

register_update_commands(main)
register_install_commands(main)
register_doctor_commands(main)
