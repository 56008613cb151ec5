"""
Skill environment diagnostics.

Checks the agent CLIs the skills are meant for, their MCP wiring,
dashboard tooling, and what is installed under .agent/skills. Reports
pass/fail with actionable fix suggestions.

Usage:
    skillsync doctor
    skillsync doctor --json-out
"""

from __future__ import annotations

import json
import shutil
import subprocess
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Optional

from . import SKILLS_DIR
from .catalog import SKILLS
from .registry.target import TargetTree
from .registry.version_store import LocalVersionStore


CATEGORIES = ("cli", "mcp", "dashboard", "skills", "registry", "memory")


@dataclass
class Check:
    """One probe of the skill environment.

    ``category`` is one of CATEGORIES and decides where the doctor
    command prints the line. ``fix`` is a shell command or instruction
    shown only when the probe failed.
    """

    name: str
    description: str
    passed: bool
    detail: str = ""
    fix: str = ""
    category: str = "skills"


@dataclass
class DiagnosticReport:
    """Every check run against one project root."""

    checks: list[Check] = field(default_factory=list)
    target: str = ""

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    @property
    def failures(self) -> list[Check]:
        return [c for c in self.checks if not c.passed]

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def total_count(self) -> int:
        return len(self.checks)

    @property
    def all_passed(self) -> bool:
        return not self.failures

    def by_category(self) -> dict[str, list[Check]]:
        """Group checks in CATEGORIES order, dropping empty groups.

        Checks with an unknown category come last, in run order.
        """
        groups: dict[str, list[Check]] = {}
        for key in CATEGORIES:
            matching = [c for c in self.checks if c.category == key]
            if matching:
                groups[key] = matching
        for check in self.checks:
            if check.category not in CATEGORIES:
                groups.setdefault(check.category, []).append(check)
        return groups

    def to_dict(self) -> dict:
        """JSON form used by ``skillsync doctor --json-out``."""
        return {
            "target": self.target,
            "passed": self.passed_count,
            "failed": self.failed_count,
            "total": self.total_count,
            "all_passed": self.all_passed,
            "categories": {
                key: sum(1 for c in checks if c.passed) == len(checks)
                for key, checks in self.by_category().items()
            },
            "checks": [asdict(c) for c in self.checks],
        }


AGENT_CLIS = [
    ("gemini", "Gemini CLI", "npm install -g @google/gemini-cli"),
    ("claude", "Claude Code CLI", "npm install -g @anthropic-ai/claude-code"),
    ("codex", "Codex CLI", "npm install -g @openai/codex"),
    ("qwen", "Qwen CLI", "npm install -g @qwen-code/qwen-code"),
]

# (relative to the user's home, format)
MCP_CONFIGS = {
    "gemini": (".gemini/settings.json", "json"),
    "claude": (".claude.json", "json"),
    "codex": (".codex/config.toml", "toml"),
}


def run_diagnostics(target_root: Path, home: Optional[Path] = None) -> DiagnosticReport:
    """Run every diagnostic check.

    Args:
        target_root: Project root holding .agent/skills.
        home: User home used to find CLI config files. Defaults to Path.home().

    Returns:
        DiagnosticReport with results for every check.
    """
    home = home or Path.home()
    report = DiagnosticReport(target=str(target_root))

    cli_checks = _check_clis()
    installed = [c.name.split(":", 1)[1] for c in cli_checks if c.passed]

    report.checks.extend(cli_checks)
    report.checks.extend(_check_mcp_configs(installed, home))
    report.checks.extend(_check_dashboard(target_root))
    report.checks.extend(_check_skills(target_root))
    report.checks.extend(_check_registry(target_root))
    report.checks.extend(_check_serena(target_root))

    return report


def _check_clis() -> list[Check]:
    """Check which agent CLIs are on PATH."""
    checks = []
    for tool, desc, fix_cmd in AGENT_CLIS:
        if shutil.which(tool):
            checks.append(Check(
                name=f"cli:{tool}",
                description=desc,
                passed=True,
                detail=_get_tool_version(tool) or "installed",
                category="cli",
            ))
        else:
            checks.append(Check(
                name=f"cli:{tool}",
                description=desc,
                passed=False,
                detail="not found",
                fix=fix_cmd,
                category="cli",
            ))
    return checks


def _check_mcp_configs(installed: list[str], home: Path) -> list[Check]:
    """Check MCP server configuration for each installed CLI."""
    checks = []
    for tool in installed:
        if tool not in MCP_CONFIGS:
            continue
        rel_path, fmt = MCP_CONFIGS[tool]
        config_path = home / rel_path
        name = f"mcp:{tool}"
        desc = f"{tool} MCP config"

        if not config_path.exists():
            checks.append(Check(
                name=name,
                description=desc,
                passed=False,
                detail="not configured",
                fix=f"Add an MCP server entry to ~/{rel_path}",
                category="mcp",
            ))
            continue

        if fmt != "json":
            checks.append(Check(
                name=name,
                description=desc,
                passed=True,
                detail=config_path.name,
                category="mcp",
            ))
            continue

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            configured = isinstance(data, dict) and bool(
                data.get("mcpServers") or data.get("mcp")
            )
        except (json.JSONDecodeError, OSError):
            configured = False

        checks.append(Check(
            name=name,
            description=desc,
            passed=configured,
            detail=config_path.name if configured else "no MCP servers",
            fix="" if configured else f"Add an mcpServers entry to ~/{rel_path}",
            category="mcp",
        ))
    return checks


def _check_dashboard(target_root: Path) -> list[Check]:
    """Check tooling the agent dashboards depend on."""
    checks = []

    fswatch = shutil.which("fswatch")
    checks.append(Check(
        name="dashboard:fswatch",
        description="fswatch (terminal dashboard)",
        passed=fswatch is not None,
        detail=fswatch or "not found",
        fix="" if fswatch else "brew install fswatch (macOS) or apt install inotify-tools (Linux)",
        category="dashboard",
    ))

    server = target_root / "scripts" / "dashboard-web" / "server.js"
    if server.exists():
        node_modules = target_root / "node_modules"
        ok = (node_modules / "chokidar").exists() and (node_modules / "ws").exists()
        checks.append(Check(
            name="dashboard:web",
            description="chokidar + ws (web dashboard)",
            passed=ok,
            detail="installed" if ok else "missing",
            fix="" if ok else "npm install",
            category="dashboard",
        ))

    return checks


def _check_skills(target_root: Path) -> list[Check]:
    """Check which catalog skills are installed and complete."""
    skills_dir = target_root / SKILLS_DIR
    if not skills_dir.is_dir():
        return [Check(
            name="skills:installed",
            description="Installed skills",
            passed=False,
            detail="no .agent/skills directory",
            fix="skillsync install --preset all",
            category="skills",
        )]

    installed = [s for s in SKILLS if (skills_dir / s.name).is_dir()]
    complete = [s for s in installed if (skills_dir / s.name / "SKILL.md").is_file()]

    checks = [Check(
        name="skills:installed",
        description="Installed skills",
        passed=bool(installed),
        detail=f"{len(installed)}/{len(SKILLS)} installed, {len(complete)} complete",
        fix="" if installed else "skillsync install --preset all",
        category="skills",
    )]

    for skill in installed:
        if skill in complete:
            continue
        checks.append(Check(
            name=f"skills:{skill.name}",
            description=f"{skill.name} bundle",
            passed=False,
            detail="SKILL.md missing",
            fix=f"skillsync install --skill {skill.name}",
            category="skills",
        ))

    return checks


def _check_registry(target_root: Path) -> list[Check]:
    """Check the registry version marker."""
    version = LocalVersionStore(TargetTree(target_root)).read()
    return [Check(
        name="registry:version",
        description="Registry version marker",
        passed=version is not None,
        detail=f"v{version}" if version else "not recorded",
        fix="" if version else "skillsync update",
        category="registry",
    )]


def _check_serena(target_root: Path) -> list[Check]:
    """Check the optional Serena memory directory."""
    serena_dir = target_root / ".serena" / "memories"
    if not serena_dir.is_dir():
        return [Check(
            name="memory:serena",
            description="Serena memories (optional)",
            passed=True,
            detail="not found (optional)",
            category="memory",
        )]

    try:
        count = sum(1 for _ in serena_dir.iterdir())
    except OSError:
        return [Check(
            name="memory:serena",
            description="Serena memories (optional)",
            passed=False,
            detail="unreadable",
            fix=f"Check permissions on {serena_dir}",
            category="memory",
        )]

    return [Check(
        name="memory:serena",
        description="Serena memories (optional)",
        passed=True,
        detail=f"{count} memory file(s)",
        category="memory",
    )]


def _get_tool_version(tool: str) -> Optional[str]:
    """Try to get a tool's version string.

    Args:
        tool: Tool name on PATH.

    Returns:
        Version string, or None.
    """
    try:
        result = subprocess.run(
            [tool, "--version"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            first_line = result.stdout.strip().split("\n")[0]
            return first_line[:80]
    except (subprocess.TimeoutExpired, OSError):
        pass
    return None
