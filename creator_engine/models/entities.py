"""
creator_engine/models/entities.py -- Character, World and Project snapshots.

Only the fields the engine reads are declared; everything else the store
exports is preserved as model extras.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, model_validator

from creator_engine.models.base import EntityBase

EntityType = Literal["character", "world", "project"]


class Character(EntityBase):
    """A character record.  ``world_id``/``project_id`` hold its link state."""

    role: str = ""
    core_concept: str = ""
    origin: str = ""
    backstory_prose: str = ""
    personality_prose: str = ""
    arc_prose: str = ""
    motivations: list[str] = []
    fears: list[str] = []
    world_id: Optional[str] = None
    project_id: Optional[str] = None

    @property
    def entity_type(self) -> str:
        return "character"


class Faction(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class World(EntityBase):
    """A world (setting) record."""

    tone: str = ""
    description: str = ""
    overview_prose: str = ""
    history_prose: str = ""
    magic_system: str = ""
    factions: list[Faction] = []
    project_id: Optional[str] = None

    @property
    def entity_type(self) -> str:
        return "world"


class Project(EntityBase):
    """A story project.  ``summary`` is the synopsis shown in the app."""

    description: str = ""
    summary: str = ""
    character_ids: list[str] = []
    world_ids: list[str] = []

    @property
    def entity_type(self) -> str:
        return "project"
