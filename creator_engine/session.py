"""
creator_engine/session.py -- Accept/dismiss workflow for link suggestions.

A :class:`SuggestionSession` sits between the suggestion engine and the
application store.  It remembers which suggestions the user dismissed (for
the life of the session only; nothing is persisted), and applies accepted
suggestions by calling the store's link mutations through the
:class:`LinkStore` protocol.

Usage:
    from creator_engine.session import SuggestionSession

    session = SuggestionSession(store)
    visible = session.suggestions(characters, worlds, projects, limit=5)
    session.accept(visible[0])       # store.link_character_to_world(...)
    session.dismiss(visible[1].id)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Protocol

from creator_engine.config import DEFAULT_WEIGHTS, ScoringWeights, SuggestionOptions
from creator_engine.errors import UnsupportedLinkError
from creator_engine.models import LinkSuggestion
from creator_engine.suggestions import generate_link_suggestions, get_suggestions_for_entity

logger = logging.getLogger(__name__)

# The global panel asks for extra candidates so dismissals don't empty it.
GLOBAL_MIN_CONFIDENCE = 0.25
GLOBAL_OVERFETCH = 2

HIGH_CONFIDENCE = 0.7
MEDIUM_CONFIDENCE = 0.5


class LinkStore(Protocol):
    """The link mutations an application store must expose."""

    def link_character_to_world(self, character_id: str, world_id: str) -> None: ...

    def add_character_to_project(self, character_id: str, project_id: str) -> None: ...

    def add_world_to_project(self, world_id: str, project_id: str) -> None: ...


def confidence_band(confidence: float) -> str:
    """Bucket a confidence into ``"high"``, ``"medium"`` or ``"low"``."""
    if confidence >= HIGH_CONFIDENCE:
        return "high"
    if confidence >= MEDIUM_CONFIDENCE:
        return "medium"
    return "low"


class SuggestionSession:
    """Session-local view of link suggestions.

    Parameters
    ----------
    store : LinkStore
        Receives the link mutation when a suggestion is accepted.
    on_accept : callable, optional
        Called with the accepted :class:`LinkSuggestion` after the store
        mutation succeeds.
    weights : ScoringWeights, optional
        Scoring weights forwarded to the suggestion engine.
    """

    def __init__(
        self,
        store: LinkStore,
        on_accept: Optional[Callable[[LinkSuggestion], None]] = None,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
    ):
        self.store = store
        self.on_accept = on_accept
        self.weights = weights
        self._dismissed: set[str] = set()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def suggestions(
        self,
        characters: Iterable,
        worlds: Iterable,
        projects: Iterable,
        limit: int = 5,
        entity_id: str | None = None,
        entity_type: str | None = None,
    ) -> list[LinkSuggestion]:
        """Return up to *limit* suggestions the user has not dismissed.

        With *entity_id* and *entity_type* the list is focused on that one
        entity; otherwise the whole store is considered, fetching
        ``limit * 2`` candidates at a 0.25 threshold so that dismissed
        entries can be replaced.
        """
        if limit <= 0:
            return []

        if entity_id and entity_type:
            candidates = get_suggestions_for_entity(
                entity_id, entity_type, characters, worlds, projects,
                weights=self.weights,
            )
        else:
            options = SuggestionOptions(
                min_confidence=GLOBAL_MIN_CONFIDENCE,
                max_suggestions=limit * GLOBAL_OVERFETCH,
            )
            candidates = generate_link_suggestions(
                characters, worlds, projects, options, weights=self.weights,
            )

        visible = [s for s in candidates if s.id not in self._dismissed]
        return visible[:limit]

    # ------------------------------------------------------------------
    # Accept / dismiss
    # ------------------------------------------------------------------

    def accept(self, suggestion: LinkSuggestion) -> None:
        """Apply *suggestion* to the store and hide it from this session.

        Raises
        ------
        UnsupportedLinkError
            If the source/target combination has no store mutation.
        """
        pair = (suggestion.source_type, suggestion.target_type)
        if pair == ("character", "world"):
            self.store.link_character_to_world(suggestion.source_id, suggestion.target_id)
        elif pair == ("character", "project"):
            self.store.add_character_to_project(suggestion.source_id, suggestion.target_id)
        elif pair == ("world", "project"):
            self.store.add_world_to_project(suggestion.source_id, suggestion.target_id)
        else:
            raise UnsupportedLinkError(
                f"Cannot link a {suggestion.source_type} to a {suggestion.target_type}"
            )

        logger.info(
            "Accepted link %s (%s -> %s)",
            suggestion.id, suggestion.source_type, suggestion.target_type,
        )
        # Hidden before the callback runs: the store is already mutated.
        self._dismissed.add(suggestion.id)
        if self.on_accept is not None:
            self.on_accept(suggestion)

    def dismiss(self, suggestion_id: str) -> None:
        self._dismissed.add(suggestion_id)

    def is_dismissed(self, suggestion_id: str) -> bool:
        return suggestion_id in self._dismissed

    @property
    def dismissed(self) -> frozenset[str]:
        return frozenset(self._dismissed)

    def reset(self) -> None:
        """Forget every dismissal."""
        self._dismissed.clear()
