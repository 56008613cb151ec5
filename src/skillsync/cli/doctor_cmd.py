"""Diagnostics command: doctor."""

from __future__ import annotations

import json
from pathlib import Path

import click

from ._common import console, target_option

CATEGORY_LABELS = {
    "cli": "Agent CLIs",
    "mcp": "MCP Configuration",
    "dashboard": "Dashboard Dependencies",
    "skills": "Skills",
    "registry": "Registry",
    "memory": "Serena Memory",
}


def register_doctor_commands(main: click.Group) -> None:
    """Register the doctor command."""

    @main.command()
    @target_option
    @click.option("--json-out", is_flag=True, help="Output as machine-readable JSON.")
    def doctor(target: str, json_out: bool):
        """Diagnose CLI installs, MCP configs, and skill status."""
        from ..doctor import run_diagnostics

        report = run_diagnostics(Path(target).expanduser())

        if json_out:
            click.echo(json.dumps(report.to_dict(), indent=2))
            return

        console.print()

        for cat_key, checks in report.by_category().items():
            console.print(f"  [bold]{CATEGORY_LABELS.get(cat_key, cat_key)}[/]")
            for c in checks:
                icon = "[green]✓[/]" if c.passed else "[red]✗[/]"
                detail = f" [dim]({c.detail})[/]" if c.detail else ""
                console.print(f"    {icon} {c.description}{detail}")
                if not c.passed and c.fix:
                    console.print(f"      [yellow]Fix: {c.fix}[/]")

            console.print()

        if report.all_passed:
            console.print(
                f"  [bold green]✓ All {report.total_count} checks passed.[/] "
                "Ready to use."
            )
        else:
            console.print(
                f"  [bold yellow]Found {report.failed_count} issue(s)[/] "
                f"out of {report.total_count} checks. See details above."
            )

        console.print()
