"""Skill bundle commands: install, list."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.table import Table

from .. import SKILLS_DIR
from ..catalog import CATEGORIES, PRESETS, resolve_preset, skill_names, skills_by_category
from ..installer import SkillInstaller
from ._common import console, registry_option, resolve_config, target_option


def register_install_commands(main: click.Group) -> None:
    """Register the install and list commands."""

    @main.command()
    @target_option
    @registry_option
    @click.option("--preset", "-p", type=click.Choice(sorted(PRESETS)),
                  help="Install a predefined set of skills.")
    @click.option("--skill", "-s", "skills", multiple=True,
                  type=click.Choice(skill_names()),
                  help="Install a specific skill (repeatable).")
    def install(target, registry, preset, skills):
        """Install skill bundles into .agent/skills."""
        if not preset and not skills:
            raise click.UsageError(
                "Choose --preset or at least one --skill (see: skillsync list)."
            )

        selected = resolve_preset(preset) if preset else []
        for name in skills:
            if name not in selected:
                selected.append(name)

        target_path = Path(target).expanduser()
        config = resolve_config(target_path, registry)
        installer = SkillInstaller(config, target_path)

        console.print("\n  Installing shared documents...", end=" ")
        shared = installer.install_shared()
        console.print(f"[green]{len(shared.written)} file(s)[/]")

        missing = []
        for name in selected:
            console.print(f"  Installing [cyan]{name}[/]...", end=" ")
            result = installer.install_skill(name)
            if "SKILL.md" in result.written:
                console.print(f"[green]done[/] [dim]({len(result.written)} file(s))[/]")
            else:
                console.print("[red]failed[/] [dim](SKILL.md unavailable)[/]")
                missing.append(name)

        console.print(f"\n  [dim]Location: {installer.skills_dir}[/]")
        if missing:
            console.print(f"  [bold red]{len(missing)} skill(s) failed:[/] {', '.join(missing)}\n")
            sys.exit(1)
        console.print("  [green]Done! Open your project in your IDE to use the skills.[/]\n")

    @main.command("list")
    def list_skills():
        """List available skills and presets."""
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Skill", style="bold cyan")
        table.add_column("Category", style="dim")
        table.add_column("Description")
        for category in CATEGORIES:
            for skill in skills_by_category(category):
                table.add_row(skill.name, category, skill.description)

        console.print()
        console.print(table)
        console.print()
        console.print("  [bold]Presets[/]")
        for name, members in PRESETS.items():
            console.print(f"    [cyan]{name:<10}[/] {', '.join(members)}")
        console.print(f"\n  [dim]Skills install under {SKILLS_DIR}/[/]\n")
