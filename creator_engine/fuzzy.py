"""
creator_engine/fuzzy.py -- Fuzzy name matching for entity linking and mentions.

Two ranking schemes live here:

    fuzzy_match_by_name    Higher-is-better score in [0, 1].  Used to resolve a
                           typed or generated name to an existing entity.
    fuzzy_search_entities  Lower-is-better rank (0 = exact).  Used by the
                           ``@`` mention popup; also consults aliases.

Both accept pydantic entities or plain dicts; anything with a ``name`` works.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from rapidfuzz.distance import Levenshtein

_CAPITALISED_WORD_RE = re.compile(r"\b[A-Z][a-z]+\b")
_CAPITALISED_PHRASE_RE = re.compile(r"\b(?:[A-Z][a-z]+\s?){2,}\b")

# fuzzy_search_entities only accepts edit distances up to this.
MAX_MENTION_DISTANCE = 2


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _name_of(item: Any) -> str:
    return _get(item, "name") or ""


def _aliases_of(item: Any) -> list[str]:
    return [a for a in (_get(item, "aliases") or []) if isinstance(a, str) and a]


# ---------------------------------------------------------------------------
# Edit distance
# ---------------------------------------------------------------------------

def levenshtein_distance(a: str, b: str) -> int:
    """Case-insensitive Levenshtein edit distance between *a* and *b*."""
    return Levenshtein.distance(a.lower(), b.lower())


def similarity_score(a: str, b: str) -> float:
    """Normalised edit similarity: 1.0 for identical strings, 0.0 for disjoint."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / max_len


def _word_match(query: str, target: str) -> float:
    """Fraction of the query's words that appear inside *target*."""
    words = query.lower().split()
    if not words:
        return 0.0
    target_lower = target.lower()
    return sum(1 for word in words if word in target_lower) / len(words)


# ---------------------------------------------------------------------------
# Higher-is-better name matching
# ---------------------------------------------------------------------------

@dataclass
class FuzzyMatchResult:
    item: Any
    score: float
    matched_fields: list[str] = field(default_factory=list)


def fuzzy_match_by_name(
    items: Iterable[Any],
    query: str,
    min_score: float = 0.3,
    max_results: int = 10,
    include_fields: Sequence[str] = (),
) -> list[FuzzyMatchResult]:
    """Rank *items* by how well their name matches *query*.

    Scoring (first rule that applies to the name):

    ============================  =========================
    exact (case-insensitive)      1.0
    name starts with query        0.9
    name contains query           0.7
    query words found in name     0.5 + 0.2 * word ratio
    edit similarity > min_score   0.6 * similarity
    ============================  =========================

    Each of *include_fields* containing the query raises the score to at
    least 0.4.  An empty query returns the first *max_results* items at
    score 1.0.
    """
    items = list(items)
    if not query or not query.strip():
        return [FuzzyMatchResult(item, 1.0, ["name"]) for item in items[:max_results]]

    query_lower = query.lower().strip()
    results: list[FuzzyMatchResult] = []

    for item in items:
        name = _name_of(item)
        name_lower = name.lower()
        score = 0.0
        matched: list[str] = []

        if name_lower == query_lower:
            score = 1.0
        elif name_lower.startswith(query_lower):
            score = 0.9
        elif query.lower() in name_lower:
            score = 0.7
        else:
            word_score = _word_match(query, name)
            if word_score > 0:
                score = 0.5 + word_score * 0.2
            else:
                sim = similarity_score(query, name)
                if sim > min_score:
                    score = sim * 0.6
        if score > 0:
            matched.append("name")

        for field_name in include_fields:
            if field_name in ("name", "id"):
                continue
            value = _get(item, field_name)
            if value and query_lower in str(value).lower():
                score = max(score, 0.4)
                if field_name not in matched:
                    matched.append(field_name)

        if score >= min_score:
            results.append(FuzzyMatchResult(item, score, matched))

    results.sort(key=lambda r: r.score, reverse=True)
    return results[:max_results]


def find_best_match(items: Iterable[Any], query: str, min_score: float = 0.5) -> Optional[Any]:
    """Return the single best name match for *query*, or ``None``."""
    results = fuzzy_match_by_name(items, query, min_score=min_score, max_results=1)
    return results[0].item if results else None


# ---------------------------------------------------------------------------
# Lower-is-better mention search
# ---------------------------------------------------------------------------

@dataclass
class FuzzyMatch:
    entity: Any
    score: float
    matched_field: str
    matched_value: str


def _rank_value(query: str, value: str) -> Optional[float]:
    """Rank *value* against *query*; ``None`` when it is not a match."""
    query_lower = query.lower()
    value_lower = value.lower()
    if query_lower == value_lower:
        return 0.0
    if value_lower.startswith(query_lower):
        return 0.5
    if query_lower in value_lower:
        return 1.0
    distance = levenshtein_distance(query, value)
    if distance <= MAX_MENTION_DISTANCE:
        return 2.0 + distance
    return None


def _match_entity(query: str, entity: Any) -> Optional[FuzzyMatch]:
    name = _name_of(entity)
    rank = _rank_value(query, name)
    if rank is not None:
        return FuzzyMatch(entity, rank, "name", name)

    best: Optional[FuzzyMatch] = None
    for alias in _aliases_of(entity):
        rank = _rank_value(query, alias)
        if rank is None:
            continue
        if rank == 0.0:
            return FuzzyMatch(entity, 0.0, "alias", alias)
        if best is None or rank < best.score:
            best = FuzzyMatch(entity, rank, "alias", alias)
    return best


def fuzzy_search_entities(query: str, entities: Iterable[Any], max_results: int = 5) -> list[FuzzyMatch]:
    """Find entities whose name or alias matches a partial/misspelled *query*.

    Ranks: exact 0, prefix 0.5, substring 1, edit distance ``d <= 2`` gives
    ``2 + d``.  Aliases are only consulted when the name itself does not
    match.  Results are sorted best first; an empty query returns ``[]``.
    """
    if not query or not query.strip():
        return []

    matches = [m for m in (_match_entity(query, e) for e in entities) if m is not None]
    matches.sort(key=lambda m: m.score)
    return matches[:max_results]


def find_entity_by_name(name: str, entities: Iterable[Any]) -> Optional[Any]:
    """Return the first entity whose name or alias equals *name* (any case)."""
    name_lower = name.lower()
    for entity in entities:
        if _name_of(entity).lower() == name_lower:
            return entity
        if any(alias.lower() == name_lower for alias in _aliases_of(entity)):
            return entity
    return None


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def extract_potential_entity_names(text: str) -> list[str]:
    """Capitalised words and capitalised multi-word phrases in *text*.

    Single words come first, then phrases such as ``"The Northern War"``;
    duplicates are dropped keeping first occurrence.
    """
    if not text:
        return []
    words = _CAPITALISED_WORD_RE.findall(text)
    phrases = [p.strip() for p in _CAPITALISED_PHRASE_RE.findall(text)]
    return list(dict.fromkeys(words + phrases))


@dataclass(frozen=True)
class Highlight:
    before: str
    match: str
    after: str


def highlight_match(text: str, query: str) -> Optional[Highlight]:
    """Split *text* around the first case-insensitive occurrence of *query*."""
    if not query:
        return None
    index = text.lower().find(query.lower())
    if index == -1:
        return None
    end = index + len(query)
    return Highlight(text[:index], text[index:end], text[end:])
