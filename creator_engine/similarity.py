"""
creator_engine/similarity.py -- Pairwise compatibility scoring.

Three scorers, one per pairing the app can link:

    score_character_world    Character -> World
    score_character_project  Character -> Project
    score_world_project      World -> Project

Each returns a :class:`ScoreResult` whose ``score`` is the sum of the
heuristics that fired, clamped to 1.0, and whose ``reasons`` lists those
heuristics in evaluation order.  Missing or empty fields simply contribute
nothing; no scorer raises on incomplete entities.

Partial genre credit (one genre string containing the other) is only given
for Character -> World.  The project pairings require an exact
case-insensitive genre match.

Usage:
    from creator_engine.similarity import score_character_world

    result = score_character_world(character, world)
    result.score            -> 0.55
    result.messages         -> ["Same genre: Fantasy", "Tone alignment: grim"]
"""

from __future__ import annotations

from creator_engine.config import DEFAULT_WEIGHTS, ContentWeights, ScoringWeights
from creator_engine.keywords import extract_keywords
from creator_engine.models import Character, Project, Reason, ReasonCode, ScoreResult, World
from creator_engine.utils import contains_ci, join_text, round_percent

MAX_SCORE = 1.0

ROLE_KEYWORDS = ("protagonist", "antagonist", "hero", "villain", "mentor", "sidekick")


# ---------------------------------------------------------------------------
# Shared primitives
# ---------------------------------------------------------------------------

def keyword_similarity(keywords_a: list[str], keywords_b: list[str]) -> float:
    """Jaccard similarity between two keyword lists.

    Returns ``|A & B| / |A | B|`` over the sets of keywords, and 0.0 when
    either list is empty.
    """
    if not keywords_a or not keywords_b:
        return 0.0
    set_a = set(keywords_a)
    set_b = set(keywords_b)
    union = set_a | set_b
    return len(set_a & set_b) / len(union)


def _content_contribution(
    source_text: str,
    target_text: str,
    code: ReasonCode,
    weights: ContentWeights,
) -> tuple[float, Reason | None]:
    """Score keyword overlap between two concatenated text blobs."""
    similarity = keyword_similarity(extract_keywords(source_text), extract_keywords(target_text))
    if similarity <= weights.threshold:
        return 0.0, None
    contribution = min(similarity * weights.multiplier, weights.cap)
    return contribution, Reason(code=code, detail=str(round_percent(similarity)))


def _result(score: float, reasons: list[Reason]) -> ScoreResult:
    return ScoreResult(score=min(max(score, 0.0), MAX_SCORE), reasons=reasons)


def _genres_equal(genre_a: str, genre_b: str) -> bool:
    return bool(genre_a) and bool(genre_b) and genre_a.lower() == genre_b.lower()


# ---------------------------------------------------------------------------
# Character -> World
# ---------------------------------------------------------------------------

def _character_world_text(character: Character) -> str:
    return join_text(
        character.backstory_prose,
        character.personality_prose,
        character.core_concept,
        character.origin,
        character.motivations,
        character.fears,
    )


def _world_text(world: World) -> str:
    faction_text = [
        f"{faction.name} {faction.description}".strip()
        for faction in world.factions
    ]
    return join_text(
        world.description,
        world.overview_prose,
        world.history_prose,
        world.magic_system,
        faction_text,
    )


def score_character_world(
    character: Character,
    world: World,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreResult:
    """Score how well *character* fits *world*.

    Heuristics, in order:

    1. Genre: exact match adds ``genre_match`` ("Same genre: <world genre>");
       otherwise one genre containing the other adds ``similar_genre``.
    2. Tone: the world's tone appearing in the character's arc and
       personality prose adds ``tone_alignment``.  Requires arc prose.
    3. Content: keyword overlap between the character's story fields and the
       world's descriptive fields, factions included.
    4. Cross-mentions: the character's name in the world overview, and the
       world's name in the character's backstory, each add their weight.
    """
    w = weights.character_world
    score = 0.0
    reasons: list[Reason] = []

    char_genre = character.genre.lower()
    world_genre = world.genre.lower()
    if char_genre and world_genre:
        if char_genre == world_genre:
            score += w.genre_match
            reasons.append(Reason(code=ReasonCode.GENRE_MATCH, detail=world.genre))
        elif char_genre in world_genre or world_genre in char_genre:
            score += w.similar_genre
            reasons.append(Reason(code=ReasonCode.SIMILAR_GENRE))

    if world.tone and character.arc_prose:
        char_content = f"{character.arc_prose} {character.personality_prose}"
        if contains_ci(char_content, world.tone):
            score += w.tone_alignment
            reasons.append(Reason(code=ReasonCode.TONE_ALIGNMENT, detail=world.tone))

    contribution, reason = _content_contribution(
        _character_world_text(character),
        _world_text(world),
        ReasonCode.CONTENT_SIMILARITY,
        weights.content,
    )
    if reason is not None:
        score += contribution
        reasons.append(reason)

    if contains_ci(world.overview_prose, character.name):
        score += w.character_mentioned
        reasons.append(Reason(code=ReasonCode.CHARACTER_MENTIONED))
    if contains_ci(character.backstory_prose, world.name):
        score += w.world_mentioned
        reasons.append(Reason(code=ReasonCode.WORLD_MENTIONED))

    return _result(score, reasons)


# ---------------------------------------------------------------------------
# Character -> Project
# ---------------------------------------------------------------------------

def score_character_project(
    character: Character,
    project: Project,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreResult:
    """Score how well *character* fits *project*.

    Exact genre match, keyword overlap with the project's description and
    synopsis, and one ``role_fit`` bonus for every archetype term
    (:data:`ROLE_KEYWORDS`) found in both the character's role and the
    project synopsis.
    """
    w = weights.character_project
    score = 0.0
    reasons: list[Reason] = []

    if _genres_equal(character.genre, project.genre):
        score += w.genre_match
        reasons.append(Reason(code=ReasonCode.GENRE_MATCH, detail=project.genre))

    contribution, reason = _content_contribution(
        join_text(character.backstory_prose, character.personality_prose, character.core_concept),
        join_text(project.description, project.summary),
        ReasonCode.STORY_ALIGNMENT,
        weights.content,
    )
    if reason is not None:
        score += contribution
        reasons.append(reason)

    if character.role and project.summary:
        for role in ROLE_KEYWORDS:
            if contains_ci(character.role, role) and contains_ci(project.summary, role):
                score += w.role_fit
                reasons.append(Reason(code=ReasonCode.ROLE_FIT, detail=character.role))

    return _result(score, reasons)


# ---------------------------------------------------------------------------
# World -> Project
# ---------------------------------------------------------------------------

def score_world_project(
    world: World,
    project: Project,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoreResult:
    """Score how well *world* fits *project*: genre, setting overlap, and
    whether the project synopsis names the world."""
    w = weights.world_project
    score = 0.0
    reasons: list[Reason] = []

    if _genres_equal(world.genre, project.genre):
        score += w.genre_match
        reasons.append(Reason(code=ReasonCode.GENRE_MATCH, detail=project.genre))

    contribution, reason = _content_contribution(
        join_text(world.description, world.overview_prose, world.history_prose),
        join_text(project.description, project.summary),
        ReasonCode.SETTING_ALIGNMENT,
        weights.content,
    )
    if reason is not None:
        score += contribution
        reasons.append(reason)

    if contains_ci(project.summary, world.name):
        score += w.world_referenced
        reasons.append(Reason(code=ReasonCode.WORLD_REFERENCED))

    return _result(score, reasons)
