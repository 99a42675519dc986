"""
creator_engine/config.py -- Scoring weights, suggestion options and engine config.

The heuristics in :mod:`creator_engine.similarity` read every constant from a
:class:`ScoringWeights` table, so the scoring policy can be tuned or tested
without touching control flow.  The defaults reproduce the weights the
application ships with.

Configuration is an explicit object passed to the functions that need it;
nothing here reads ambient global state.  ``load_config`` reads an optional
JSON file laid out like ``EngineConfig.model_dump()``::

    {
        "weights": {"character_world": {"genre_match": 0.5}},
        "suggestions": {"min_confidence": 0.25, "max_suggestions": 5},
        "migrations": {"max_backups": 3}
    }
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from creator_engine.errors import ConfigError
from creator_engine.utils import safe_read_json, safe_write_json

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Scoring weights
# ---------------------------------------------------------------------------

class ContentWeights(BaseModel):
    """Keyword-overlap contribution shared by all three pairings.

    A similarity above ``threshold`` adds ``min(similarity * multiplier, cap)``.
    """

    model_config = ConfigDict(extra="forbid")

    threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    multiplier: float = Field(default=2.0, ge=0.0)
    cap: float = Field(default=0.3, ge=0.0, le=1.0)


class CharacterWorldWeights(BaseModel):
    model_config = ConfigDict(extra="forbid")

    genre_match: float = Field(default=0.4, ge=0.0, le=1.0)
    similar_genre: float = Field(default=0.2, ge=0.0, le=1.0)
    tone_alignment: float = Field(default=0.1, ge=0.0, le=1.0)
    character_mentioned: float = Field(default=0.15, ge=0.0, le=1.0)
    world_mentioned: float = Field(default=0.15, ge=0.0, le=1.0)


class CharacterProjectWeights(BaseModel):
    model_config = ConfigDict(extra="forbid")

    genre_match: float = Field(default=0.5, ge=0.0, le=1.0)
    role_fit: float = Field(default=0.1, ge=0.0, le=1.0)


class WorldProjectWeights(BaseModel):
    model_config = ConfigDict(extra="forbid")

    genre_match: float = Field(default=0.5, ge=0.0, le=1.0)
    world_referenced: float = Field(default=0.2, ge=0.0, le=1.0)


class ScoringWeights(BaseModel):
    """Weights table, one section per entity pairing."""

    model_config = ConfigDict(extra="forbid")

    content: ContentWeights = Field(default_factory=ContentWeights)
    character_world: CharacterWorldWeights = Field(default_factory=CharacterWorldWeights)
    character_project: CharacterProjectWeights = Field(default_factory=CharacterProjectWeights)
    world_project: WorldProjectWeights = Field(default_factory=WorldProjectWeights)


DEFAULT_WEIGHTS = ScoringWeights()


# ---------------------------------------------------------------------------
# Suggestion options
# ---------------------------------------------------------------------------

class SuggestionOptions(BaseModel):
    """Thresholds and gates for :func:`generate_link_suggestions`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    min_confidence: float = Field(default=0.3, ge=0.0, le=1.0)
    max_suggestions: int = Field(default=10, ge=0)
    include_world_links: bool = True
    include_project_links: bool = True

    def merged(self, **overrides: Any) -> "SuggestionOptions":
        """Return a validated copy with *overrides* applied."""
        if not overrides:
            return self
        return SuggestionOptions.model_validate({**self.model_dump(), **overrides})


class MigrationConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    auto_backup: bool = True
    cleanup_old_backups: bool = True
    max_backups: int = Field(default=5, ge=1)


class EngineConfig(BaseModel):
    """Everything the engine can be configured with, in one object."""

    model_config = ConfigDict(extra="forbid")

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    suggestions: SuggestionOptions = Field(default_factory=SuggestionOptions)
    migrations: MigrationConfig = Field(default_factory=MigrationConfig)


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------

def load_config(path=None) -> EngineConfig:
    """Load an :class:`EngineConfig` from a JSON file.

    Parameters
    ----------
    path : str or pathlib.Path, optional
        The config file.  ``None`` or a missing/unreadable file yields the
        defaults.

    Raises
    ------
    ConfigError
        If the file parses but holds unknown keys or out-of-range values.
    """
    if path is None:
        return EngineConfig()

    raw = safe_read_json(path)
    if raw is None:
        logger.debug("No engine config at %s, using defaults", path)
        return EngineConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Engine config at {path} must be a JSON object")

    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid engine config at {path}: {exc}") from exc


def save_config(config: EngineConfig, path) -> None:
    """Atomically write *config* to *path* as JSON."""
    safe_write_json(path, config.model_dump(mode="json"))
    logger.info("Engine config written to %s", path)
