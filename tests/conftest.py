"""
Shared pytest fixtures for the creator_engine test suite.

Provides:
    - sample_character / sample_world / sample_project: raw store dicts in
      the application's camelCase layout
    - store: a small snapshot (characters, worlds, projects) with one
      already-linked character and one unrelated character
    - mention_entities: named entities with aliases for fuzzy search tests
    - backup_store: a BackupStore rooted in a temporary directory
"""

import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure creator_engine/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from creator_engine.migrations import BackupStore  # noqa: E402
from creator_engine.models import Character, Project, World  # noqa: E402


# ---------------------------------------------------------------------------
# Entity fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_character():
    """An unlinked fantasy character whose backstory names Virelith."""
    return {
        "id": "#ELARA_001",
        "name": "Elara",
        "role": "Protagonist",
        "genre": "Fantasy",
        "coreConcept": "An exiled crystal mage",
        "backstoryProse": "Elara grew up beneath the crystal spires of Virelith.",
        "personalityProse": "Stubborn, loyal and quietly grim.",
        "arcProse": "A grim survivor who learns to lead.",
        "motivations": ["reclaim the crystal spires"],
        "fears": ["losing her magic"],
    }


@pytest.fixture
def sample_world():
    """A grim fantasy world whose overview mentions Elara."""
    return {
        "id": "@VIRELITH_001",
        "name": "Virelith",
        "genre": "Fantasy",
        "tone": "grim",
        "description": "A shattered kingdom of crystal spires.",
        "overviewProse": "Elara was born here, among the crystal spires.",
        "historyProse": "The spires cracked when the last mage king fell.",
        "magicSystem": "Crystal resonance magic",
        "factions": [
            {"name": "Spire Wardens", "description": "Keepers of crystal magic"},
        ],
    }


@pytest.fixture
def sample_project():
    """A fantasy project whose synopsis references Virelith and a protagonist."""
    return {
        "id": "$STORY_001",
        "name": "The Shadow Chronicles",
        "genre": "Fantasy",
        "description": "An epic fantasy series.",
        "summary": "A young protagonist rises against the tyrants of Virelith.",
    }


@pytest.fixture
def store(sample_character, sample_world, sample_project):
    """A small store snapshot as the application exports it."""
    characters = [
        sample_character,
        {
            "id": "#MARCUS_002",
            "name": "Marcus Steel",
            "role": "Antagonist",
            "genre": "Sci-Fi",
            "backstoryProse": "A ruthless general of Meridian Prime.",
            "worldId": "@MERIDIAN_002",
        },
        {
            "id": "#NOVA_003",
            "name": "Nova",
            "genre": "Horror",
            "backstoryProse": "abandoned lighthouse",
        },
    ]
    worlds = [
        sample_world,
        {
            "id": "@MERIDIAN_002",
            "name": "Meridian Prime",
            "genre": "Sci-Fi",
            "description": "The capital world of a failing empire.",
        },
    ]
    projects = [
        sample_project,
        {
            "id": "$STORY_002",
            "name": "Starfall",
            "genre": "Sci-Fi",
            "summary": "An empire collapses around Meridian Prime.",
        },
    ]
    return {"characters": characters, "worlds": worlds, "projects": projects}


@pytest.fixture
def models(store):
    """The ``store`` fixture validated into Character/World/Project models."""
    return (
        [Character.model_validate(c) for c in store["characters"]],
        [World.model_validate(w) for w in store["worlds"]],
        [Project.model_validate(p) for p in store["projects"]],
    )


@pytest.fixture
def mention_entities():
    """Characters, worlds and projects with aliases for mention search."""
    return [
        Character(id="#KIRA_001", name="Kira", aliases=["The Shadow", "K"], genre="Fantasy"),
        Character(
            id="#ELARA_002",
            name="Elara Moonwhisper",
            aliases=["Lady Elara", "The Moon Singer"],
            genre="Fantasy",
        ),
        Character(id="#MARCUS_003", name="Marcus Steel", genre="Sci-Fi"),
        World(
            id="@VIRELITH_001",
            name="The Northern War",
            aliases=["Northern Conflict", "The Great War"],
            genre="Fantasy",
        ),
        World(id="@MERIDIAN_002", name="Meridian Prime", aliases=["The Capital", "Prime"]),
        Project(id="$STORY_001", name="The Shadow Chronicles", aliases=["TSC", "Chronicles"]),
    ]


# ---------------------------------------------------------------------------
# Backups
# ---------------------------------------------------------------------------

@pytest.fixture
def backup_store(tmp_path):
    """A BackupStore writing into a temporary directory."""
    return BackupStore(tmp_path / "backups")
