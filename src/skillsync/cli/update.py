"""Registry update commands: update, update --check."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich.panel import Panel

from ..models import SyncReport
from ..registry import Synchronizer, SyncError
from ._common import console, registry_option, resolve_config, target_option


def _render_report(report: SyncReport) -> None:
    if report.up_to_date:
        console.print("  [green]Already up to date![/]")
        console.print(f"  Current version: [cyan]{report.version_after}[/]\n")
        return

    if report.failed:
        console.print("  [yellow]Update completed with errors[/]")
        console.print(
            Panel(
                "\n".join(
                    f"[red]✗[/] {o.path}: {o.reason.value}"
                    + (f" [dim]({o.detail})[/]" if o.detail else "")
                    for o in report.failed
                ),
                title=f"{report.failure_count} file(s) failed",
                border_style="red",
            )
        )
        console.print(
            f"  [bold green]{report.success_count}[/] files updated, "
            f"[bold red]{report.failure_count}[/] failed\n"
        )
    else:
        console.print(f"  Updated to version [cyan]{report.version_after}[/]!")
        console.print(
            f"  [bold green]{report.success_count}[/] files updated successfully\n"
        )


def register_update_commands(main: click.Group) -> None:
    """Register the update command."""

    @main.command()
    @target_option
    @registry_option
    @click.option("--concurrency", type=int, default=None,
                  help="Maximum simultaneous downloads (default 10).")
    @click.option("--check", "check_only", is_flag=True,
                  help="Only report whether an update is available.")
    @click.option("--json-out", is_flag=True, help="Output as machine-readable JSON.")
    def update(target, registry, concurrency, check_only, json_out):
        """Update skills to the latest registry version."""
        target_path = Path(target).expanduser()
        config = resolve_config(target_path, registry, concurrency)
        engine = Synchronizer(config, target_path)

        if not json_out:
            console.print("\n  Checking for updates...")

        try:
            if check_only:
                status = engine.check()
            else:
                report = engine.synchronize()
        except SyncError as exc:
            console.print(f"  [bold red]Update failed:[/] {exc}")
            sys.exit(1)

        if check_only:
            if json_out:
                click.echo(json.dumps({
                    "local_version": status.local_version,
                    "remote_version": status.remote_version,
                    "up_to_date": status.up_to_date,
                }, indent=2))
            elif status.up_to_date:
                console.print(f"  [green]Up to date[/] at [cyan]{status.remote_version}[/]\n")
            else:
                console.print(
                    f"  Update available: {status.local_version or '[dim]not installed[/]'}"
                    f" -> [cyan]{status.remote_version}[/]\n"
                )
            return

        if json_out:
            click.echo(json.dumps(report.to_dict(), indent=2))
        else:
            if not report.up_to_date:
                console.print(
                    f"  {report.version_before or 'not installed'} -> "
                    f"[cyan]{report.version_after}[/]"
                )
            _render_report(report)

        if not report.all_succeeded:
            sys.exit(1)
