"""
creator_engine/models/suggestion.py -- Scoring results and link suggestions.

A scorer returns a :class:`ScoreResult`: the clamped confidence plus the
ordered list of :class:`Reason` objects that fired.  Each reason carries a
structured :class:`ReasonCode` and the detail needed to render it, so callers
can test or localise rationales without matching on display strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from creator_engine.utils import round_percent


class ReasonCode(str, Enum):
    GENRE_MATCH = "genre_match"
    SIMILAR_GENRE = "similar_genre"
    TONE_ALIGNMENT = "tone_alignment"
    CONTENT_SIMILARITY = "content_similarity"
    STORY_ALIGNMENT = "story_alignment"
    SETTING_ALIGNMENT = "setting_alignment"
    CHARACTER_MENTIONED = "character_mentioned"
    WORLD_MENTIONED = "world_mentioned"
    WORLD_REFERENCED = "world_referenced"
    ROLE_FIT = "role_fit"


# Display templates; ``{detail}`` is substituted where present.
_REASON_TEMPLATES = {
    ReasonCode.GENRE_MATCH: "Same genre: {detail}",
    ReasonCode.SIMILAR_GENRE: "Similar genre",
    ReasonCode.TONE_ALIGNMENT: "Tone alignment: {detail}",
    ReasonCode.CONTENT_SIMILARITY: "Content similarity ({detail}%)",
    ReasonCode.STORY_ALIGNMENT: "Story alignment ({detail}%)",
    ReasonCode.SETTING_ALIGNMENT: "Setting alignment ({detail}%)",
    ReasonCode.CHARACTER_MENTIONED: "Character mentioned in world",
    ReasonCode.WORLD_MENTIONED: "World mentioned in backstory",
    ReasonCode.WORLD_REFERENCED: "World referenced in synopsis",
    ReasonCode.ROLE_FIT: "Role fits story: {detail}",
}


class Reason(BaseModel):
    """One triggered scoring rationale."""

    model_config = ConfigDict(frozen=True)

    code: ReasonCode
    detail: str = ""

    def render(self) -> str:
        return _REASON_TEMPLATES[self.code].format(detail=self.detail)


class ScoreResult(BaseModel):
    """Confidence for one entity pair plus the rationales that produced it."""

    score: float = Field(default=0.0, ge=0.0, le=1.0)
    reasons: list[Reason] = []

    @property
    def messages(self) -> list[str]:
        return [reason.render() for reason in self.reasons]

    def primary_message(self, fallback: str) -> str:
        """Return the first rendered reason, or *fallback* if none fired."""
        if self.reasons:
            return self.reasons[0].render()
        return fallback


SourceType = Literal["character", "world"]
TargetType = Literal["world", "project"]


class LinkSuggestion(BaseModel):
    """A proposed, not-yet-applied link between two entities.

    ``id`` is ``"<source_id>-<target_id>"`` so repeated runs produce the
    same identifier for the same pair.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source_id: str
    source_type: SourceType
    source_name: str = ""
    target_id: str
    target_type: TargetType
    target_name: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    reason_code: Optional[ReasonCode] = None

    @property
    def percent(self) -> int:
        return round_percent(self.confidence)
