"""
Published skill catalog and install presets.

Names here match directory names under .agent/skills in the registry.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SkillInfo:
    """One installable skill bundle."""

    name: str
    description: str
    category: str


SKILLS: tuple[SkillInfo, ...] = (
    SkillInfo("frontend-agent", "React/Next.js UI specialist", "domain"),
    SkillInfo("backend-agent", "FastAPI/SQLAlchemy API specialist", "domain"),
    SkillInfo("mobile-agent", "Flutter/Dart mobile specialist", "domain"),
    SkillInfo("pm-agent", "Product manager - task decomposition", "coordination"),
    SkillInfo("qa-agent", "QA - OWASP, Lighthouse, WCAG", "coordination"),
    SkillInfo("workflow-guide", "Manual multi-agent orchestration", "coordination"),
    SkillInfo("orchestrator", "Automated parallel CLI execution", "coordination"),
    SkillInfo("debug-agent", "Bug fixing specialist", "utility"),
    SkillInfo("commit", "Conventional Commits helper", "utility"),
)

CATEGORIES = ("domain", "coordination", "utility")

_SUPPORT = ["pm-agent", "qa-agent", "debug-agent", "commit"]

PRESETS: dict[str, list[str]] = {
    "all": [s.name for s in SKILLS],
    "fullstack": ["frontend-agent", "backend-agent", *_SUPPORT],
    "frontend": ["frontend-agent", *_SUPPORT],
    "backend": ["backend-agent", *_SUPPORT],
    "mobile": ["mobile-agent", *_SUPPORT],
}


def skill_names() -> list[str]:
    return [s.name for s in SKILLS]


def get_skill(name: str) -> SkillInfo:
    """Look up a skill by name.

    Raises:
        KeyError: If no such skill is published.
    """
    for skill in SKILLS:
        if skill.name == name:
            return skill
    raise KeyError(name)


def skills_by_category(category: str) -> list[SkillInfo]:
    return [s for s in SKILLS if s.category == category]


def resolve_preset(name: str) -> list[str]:
    """Expand a preset into its skill names.

    Raises:
        ValueError: For an unknown preset.
    """
    try:
        return list(PRESETS[name])
    except KeyError:
        raise ValueError(
            f"Unknown preset '{name}'. Choose one of: {', '.join(PRESETS)}"
        ) from None
