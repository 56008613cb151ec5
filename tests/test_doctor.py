"""Tests for the skillsync doctor diagnostics module.

Covers:
- DiagnosticReport structure and properties
- Agent CLI and MCP config checks
- Skills, registry marker, and Serena checks
- CLI integration (doctor command via CliRunner)
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from skillsync.doctor import (
    Check,
    DiagnosticReport,
    _check_clis,
    _check_dashboard,
    _check_mcp_configs,
    _check_registry,
    _check_serena,
    _check_skills,
    run_diagnostics,
)


@pytest.fixture
def project(target_root: Path) -> Path:
    """A project with two installed skills, one incomplete."""
    skills = target_root / ".agent" / "skills"
    (skills / "frontend-agent").mkdir(parents=True)
    (skills / "frontend-agent" / "SKILL.md").write_text("# fe")
    (skills / "qa-agent").mkdir()
    (skills / "_version.json").write_text(json.dumps({"version": "1.2.0"}))
    return target_root


@pytest.fixture
def user_home(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


class TestDiagnosticReport:
    """Test DiagnosticReport properties."""

    def test_counts(self):
        report = DiagnosticReport(checks=[
            Check(name="a", description="A", passed=True),
            Check(name="b", description="B", passed=True),
            Check(name="c", description="C", passed=False),
        ])

        assert report.passed_count == 2
        assert report.failed_count == 1
        assert report.total_count == 3
        assert not report.all_passed

    def test_by_category_order(self):
        report = DiagnosticReport(checks=[
            Check(name="marker", description="M", passed=True, category="registry"),
            Check(name="git", description="G", passed=True, category="cli"),
            Check(name="odd", description="O", passed=True, category="extra"),
            Check(name="bundle", description="B", passed=False, category="skills"),
        ])

        groups = report.by_category()

        assert list(groups) == ["cli", "skills", "registry", "extra"]
        assert [c.name for c in report.failures] == ["bundle"]
        assert report.to_dict()["categories"] == {
            "cli": True, "skills": False, "registry": True, "extra": True,
        }

    def test_to_dict(self):
        report = DiagnosticReport(
            target="/proj",
            checks=[Check(name="x", description="X", passed=True, detail="ok")],
        )
        d = report.to_dict()

        assert d["target"] == "/proj"
        assert d["passed"] == 1
        assert len(d["checks"]) == 1
        json.dumps(d)


class TestCLIChecks:
    """Agent CLI detection."""

    def test_missing_clis(self):
        with patch("skillsync.doctor.shutil.which", return_value=None):
            checks = _check_clis()

        assert [c.name for c in checks] == ["cli:gemini", "cli:claude", "cli:codex", "cli:qwen"]
        assert not any(c.passed for c in checks)
        assert all(c.fix for c in checks)

    def test_installed_cli_reports_version(self):
        with patch("skillsync.doctor.shutil.which", return_value="/usr/bin/tool"), \
             patch("skillsync.doctor._get_tool_version", return_value="1.0.3"):
            checks = _check_clis()

        assert all(c.passed for c in checks)
        assert checks[0].detail == "1.0.3"


class TestMCPChecks:
    """MCP configuration detection."""

    def test_json_with_mcp_servers(self, user_home):
        (user_home / ".claude.json").write_text(json.dumps({"mcpServers": {"serena": {}}}))

        checks = _check_mcp_configs(["claude"], user_home)

        assert checks[0].passed

    def test_json_without_mcp_servers(self, user_home):
        (user_home / ".gemini").mkdir()
        (user_home / ".gemini" / "settings.json").write_text("{}")

        checks = _check_mcp_configs(["gemini"], user_home)

        assert not checks[0].passed
        assert checks[0].fix

    def test_corrupt_json(self, user_home):
        (user_home / ".claude.json").write_text("{nope")
        assert not _check_mcp_configs(["claude"], user_home)[0].passed

    def test_toml_presence(self, user_home):
        (user_home / ".codex").mkdir()
        (user_home / ".codex" / "config.toml").write_text("[mcp_servers]\n")
        assert _check_mcp_configs(["codex"], user_home)[0].passed

    def test_missing_config(self, user_home):
        checks = _check_mcp_configs(["codex"], user_home)
        assert not checks[0].passed

    def test_cli_without_known_config_skipped(self, user_home):
        assert _check_mcp_configs(["qwen"], user_home) == []


class TestProjectChecks:
    """Skills, registry marker, dashboard and Serena checks."""

    def test_no_skills_dir(self, target_root):
        checks = _check_skills(target_root)
        assert len(checks) == 1
        assert not checks[0].passed

    def test_installed_and_incomplete(self, project):
        checks = _check_skills(project)

        assert checks[0].passed
        assert checks[0].detail == "2/9 installed, 1 complete"
        assert [c.name for c in checks[1:]] == ["skills:qa-agent"]
        assert not checks[1].passed

    def test_registry_marker(self, project, target_root):
        assert _check_registry(project)[0].detail == "v1.2.0"

    def test_registry_marker_missing(self, tmp_path):
        check = _check_registry(tmp_path)[0]
        assert not check.passed
        assert check.fix == "skillsync update"

    def test_serena_optional(self, target_root):
        check = _check_serena(target_root)[0]
        assert check.passed
        assert "optional" in check.detail

    def test_serena_count(self, target_root):
        memories = target_root / ".serena" / "memories"
        memories.mkdir(parents=True)
        (memories / "a.md").write_text("x")
        (memories / "b.md").write_text("y")

        assert _check_serena(target_root)[0].detail == "2 memory file(s)"

    def test_web_dashboard_deps(self, target_root):
        server = target_root / "scripts" / "dashboard-web"
        server.mkdir(parents=True)
        (server / "server.js").write_text("")

        with patch("skillsync.doctor.shutil.which", return_value=None):
            checks = _check_dashboard(target_root)

        assert [c.name for c in checks] == ["dashboard:fswatch", "dashboard:web"]
        assert not checks[1].passed
        assert checks[1].fix == "npm install"


class TestRunDiagnostics:
    def test_categories(self, project, user_home):
        with patch("skillsync.doctor.shutil.which", return_value=None):
            report = run_diagnostics(project, home=user_home)

        categories = {c.category for c in report.checks}
        assert categories == {"cli", "dashboard", "skills", "registry", "memory"}
        assert report.target == str(project)


class TestCLIDoctorCommand:
    """Test the CLI doctor command via CliRunner."""

    def test_doctor_help(self):
        from skillsync.cli import main

        result = CliRunner().invoke(main, ["doctor", "--help"])
        assert result.exit_code == 0
        assert "Diagnose" in result.output
        assert "--json-out" in result.output

    def test_doctor_json_output(self, project):
        from skillsync.cli import main

        result = CliRunner().invoke(main, ["doctor", "--target", str(project), "--json-out"])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert "passed" in data
        assert isinstance(data["checks"], list)

    def test_doctor_human_output(self, project):
        from skillsync.cli import main

        result = CliRunner().invoke(main, ["doctor", "--target", str(project)])
        assert result.exit_code == 0
        assert "Agent CLIs" in result.output
        assert "Skills" in result.output
