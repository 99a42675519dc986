"""
creator_engine -- Entity linking engine for the 5D Character Creator.

Modules:
    keywords     Keyword extraction from free-text fields.
    similarity   Character/World/Project compatibility scoring.
    suggestions  Ranked link-suggestion generation.
    session      Accept/dismiss workflow over a LinkStore.
    fuzzy        Fuzzy name matching and @mention search.
    link_graph   NetworkX graph of existing links.
    migrations   Store snapshot schema migrations and backups.
    snapshot     Loading store snapshots into typed models.
    config       Weights, options and engine configuration.
"""

from creator_engine.config import EngineConfig, ScoringWeights, SuggestionOptions, load_config
from creator_engine.keywords import extract_keywords
from creator_engine.models import Character, LinkSuggestion, Project, World
from creator_engine.similarity import (
    keyword_similarity,
    score_character_project,
    score_character_world,
    score_world_project,
)
from creator_engine.suggestions import generate_link_suggestions, get_suggestions_for_entity

__version__ = "0.1.0"

__all__ = [
    "Character",
    "World",
    "Project",
    "LinkSuggestion",
    "EngineConfig",
    "ScoringWeights",
    "SuggestionOptions",
    "load_config",
    "extract_keywords",
    "keyword_similarity",
    "score_character_world",
    "score_character_project",
    "score_world_project",
    "generate_link_suggestions",
    "get_suggestions_for_entity",
]
