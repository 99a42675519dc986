"""
creator_engine/suggestions.py -- Ranked link suggestions between entities.

Enumerates every (unlinked source) x (candidate target) pair for the enabled
pairings, scores each pair with :mod:`creator_engine.similarity`, keeps the
pairs at or above ``min_confidence`` and returns them ranked by confidence.

Pairings, in enumeration order:

    character -> world    characters without ``world_id``    (include_world_links)
    character -> project  characters without ``project_id``  (include_project_links)
    world -> project      worlds without ``project_id``      (include_project_links)

Ranking is a stable sort on confidence, so ties keep enumeration order and
identical inputs always yield identical output.  Inputs are never mutated.

Usage:
    from creator_engine.suggestions import generate_link_suggestions

    suggestions = generate_link_suggestions(characters, worlds, projects,
                                            min_confidence=0.25)
    for s in suggestions:
        print(s.source_name, "->", s.target_name, s.percent, s.reason)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from creator_engine.config import DEFAULT_WEIGHTS, ScoringWeights, SuggestionOptions
from creator_engine.models import Character, LinkSuggestion, Project, ScoreResult, World
from creator_engine.similarity import (
    score_character_project,
    score_character_world,
    score_world_project,
)

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = SuggestionOptions()

# Reason shown when a pair qualifies but no rationale fired.
FALLBACK_REASONS = {
    ("character", "world"): "Similar content",
    ("character", "project"): "Story alignment",
    ("world", "project"): "Genre match",
}


@dataclass(frozen=True)
class _Pairing:
    source_type: str
    target_type: str
    sources: Sequence[Any]
    targets: Sequence[Any]
    scorer: Callable[..., ScoreResult]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

def _resolve_options(options: SuggestionOptions | None, overrides: dict) -> SuggestionOptions:
    return (options or DEFAULT_OPTIONS).merged(**overrides)


# ---------------------------------------------------------------------------
# Core pipeline
# ---------------------------------------------------------------------------

def _build_pairings(
    character_sources: Sequence[Character],
    world_sources: Sequence[World],
    worlds: Sequence[World],
    projects: Sequence[Project],
    options: SuggestionOptions,
) -> list[_Pairing]:
    pairings: list[_Pairing] = []
    if options.include_world_links:
        pairings.append(_Pairing(
            "character", "world",
            [c for c in character_sources if not c.world_id],
            worlds,
            score_character_world,
        ))
    if options.include_project_links:
        pairings.append(_Pairing(
            "character", "project",
            [c for c in character_sources if not c.project_id],
            projects,
            score_character_project,
        ))
        pairings.append(_Pairing(
            "world", "project",
            [w for w in world_sources if not w.project_id],
            projects,
            score_world_project,
        ))
    return pairings


def _collect(
    pairings: list[_Pairing],
    options: SuggestionOptions,
    weights: ScoringWeights,
) -> list[LinkSuggestion]:
    """Score every pair and rank the ones that clear the threshold."""
    if options.max_suggestions == 0:
        return []

    suggestions: list[LinkSuggestion] = []
    scored = 0

    for pairing in pairings:
        fallback = FALLBACK_REASONS[(pairing.source_type, pairing.target_type)]
        for source in pairing.sources:
            for target in pairing.targets:
                result = pairing.scorer(source, target, weights)
                scored += 1
                if result.score < options.min_confidence:
                    continue
                suggestions.append(LinkSuggestion(
                    id=f"{source.id}-{target.id}",
                    source_id=source.id,
                    source_type=pairing.source_type,
                    source_name=source.name,
                    target_id=target.id,
                    target_type=pairing.target_type,
                    target_name=target.name,
                    confidence=result.score,
                    reason=result.primary_message(fallback),
                    reason_code=result.reasons[0].code if result.reasons else None,
                ))

    # sorted() is stable, so equal confidences keep enumeration order.
    ranked = sorted(suggestions, key=lambda s: s.confidence, reverse=True)
    logger.debug(
        "Scored %d candidate pairs, %d above %.2f, returning %d",
        scored, len(ranked), options.min_confidence,
        min(len(ranked), options.max_suggestions),
    )
    return ranked[:options.max_suggestions]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_link_suggestions(
    characters: Iterable[Character | dict],
    worlds: Iterable[World | dict],
    projects: Iterable[Project | dict],
    options: SuggestionOptions | None = None,
    *,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    **overrides: Any,
) -> list[LinkSuggestion]:
    """Suggest links for every unlinked character and world.

    Parameters
    ----------
    characters, worlds, projects : iterable
        Store snapshots, as models or as the store's camelCase dicts.
    options : SuggestionOptions, optional
        Thresholds and pairing gates.  Defaults to ``min_confidence=0.3``,
        ``max_suggestions=10`` with both pairing families enabled.
    weights : ScoringWeights, optional
        Scoring weights table.
    **overrides
        Individual option fields (e.g. ``min_confidence=0.25``) applied on
        top of *options*.

    Returns
    -------
    list[LinkSuggestion]
        At most ``max_suggestions`` suggestions, each with
        ``confidence >= min_confidence``, sorted by confidence descending.
    """
    opts = _resolve_options(options, overrides)
    character_list = Character.coerce_many(characters)
    world_list = World.coerce_many(worlds)
    project_list = Project.coerce_many(projects)

    pairings = _build_pairings(character_list, world_list, world_list, project_list, opts)
    return _collect(pairings, opts, weights)


def get_suggestions_for_entity(
    entity_id: str,
    entity_type: str,
    characters: Iterable[Character | dict],
    worlds: Iterable[World | dict],
    projects: Iterable[Project | dict],
    options: SuggestionOptions | None = None,
    *,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    **overrides: Any,
) -> list[LinkSuggestion]:
    """Suggest links for a single character or world.

    Runs the same pairing, scoring and ranking path as
    :func:`generate_link_suggestions` with the source set narrowed to the
    one entity: a character gets its world and project pairings, a world
    gets its project pairing.

    Returns an empty list when *entity_id* is unknown or *entity_type* is
    neither ``"character"`` nor ``"world"``.
    """
    opts = _resolve_options(options, overrides)
    character_list = Character.coerce_many(characters)
    world_list = World.coerce_many(worlds)
    project_list = Project.coerce_many(projects)

    if entity_type == "character":
        source = next((c for c in character_list if c.id == entity_id), None)
        if source is None:
            return []
        pairings = _build_pairings([source], [], world_list, project_list, opts)
    elif entity_type == "world":
        source = next((w for w in world_list if w.id == entity_id), None)
        if source is None:
            return []
        pairings = _build_pairings([], [source], world_list, project_list, opts)
    else:
        logger.debug("No link suggestions for entity type %r", entity_type)
        return []

    return _collect(pairings, opts, weights)
