"""
SkillSync — agent skill registry synchronization.

Keeps a project's .agent/skills tree in step with the published
skill registry. Every file is verified against the manifest before
it touches disk.
"""

__version__ = "0.1.0"
__author__ = "smilinTux"

DEFAULT_REGISTRY_URL = (
    "https://raw.githubusercontent.com/first-fluke/oh-my-antigravity/main"
)
SKILLS_DIR = ".agent/skills"
