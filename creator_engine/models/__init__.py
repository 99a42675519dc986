"""
creator_engine/models/ -- Pydantic v2 models for the 5D Character Creator engine.

Submodules:
    base        EntityBase with the store's camelCase/null handling.
    entities    Character, World, Faction and Project snapshots.
    suggestion  ReasonCode, Reason, ScoreResult and LinkSuggestion.
"""

from creator_engine.models.base import EntityBase
from creator_engine.models.entities import Character, EntityType, Faction, Project, World
from creator_engine.models.suggestion import (
    LinkSuggestion,
    Reason,
    ReasonCode,
    ScoreResult,
)

__all__ = [
    "EntityBase",
    "EntityType",
    "Character",
    "Faction",
    "World",
    "Project",
    "LinkSuggestion",
    "Reason",
    "ReasonCode",
    "ScoreResult",
]
