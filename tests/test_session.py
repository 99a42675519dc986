"""
Tests for creator_engine/session.py -- SuggestionSession.

Validates:
    - Accepting dispatches to the matching store mutation
    - Accepted and dismissed suggestions disappear from the listing
    - The global listing replaces dismissed entries up to the limit
    - Unsupported pairings raise UnsupportedLinkError
    - confidence_band thresholds
"""

import pytest

from creator_engine.errors import UnsupportedLinkError
from creator_engine.models import LinkSuggestion
from creator_engine.session import SuggestionSession, confidence_band


class FakeStore:
    """Records link mutations instead of applying them."""

    def __init__(self):
        self.calls = []

    def link_character_to_world(self, character_id, world_id):
        self.calls.append(("link_character_to_world", character_id, world_id))

    def add_character_to_project(self, character_id, project_id):
        self.calls.append(("add_character_to_project", character_id, project_id))

    def add_world_to_project(self, world_id, project_id):
        self.calls.append(("add_world_to_project", world_id, project_id))


def _suggestion(source_type, target_type, source_id="s1", target_id="t1"):
    return LinkSuggestion(
        id=f"{source_id}-{target_id}",
        source_id=source_id,
        source_type=source_type,
        target_id=target_id,
        target_type=target_type,
        confidence=0.5,
        reason="Similar content",
    )


@pytest.fixture
def fake_store():
    return FakeStore()


class TestAccept:
    """Tests for SuggestionSession.accept."""

    @pytest.mark.parametrize("source_type, target_type, method", [
        ("character", "world", "link_character_to_world"),
        ("character", "project", "add_character_to_project"),
        ("world", "project", "add_world_to_project"),
    ])
    def test_dispatch(self, fake_store, source_type, target_type, method):
        session = SuggestionSession(fake_store)
        session.accept(_suggestion(source_type, target_type))
        assert fake_store.calls == [(method, "s1", "t1")]

    def test_world_to_world_unsupported(self, fake_store):
        session = SuggestionSession(fake_store)
        with pytest.raises(UnsupportedLinkError):
            session.accept(_suggestion("world", "world"))
        assert fake_store.calls == []
        assert not session.is_dismissed("s1-t1")

    def test_on_accept_callback(self, fake_store):
        accepted = []
        session = SuggestionSession(fake_store, on_accept=accepted.append)
        suggestion = _suggestion("character", "world")
        session.accept(suggestion)
        assert accepted == [suggestion]

    def test_accepted_is_hidden(self, fake_store):
        session = SuggestionSession(fake_store)
        session.accept(_suggestion("character", "world"))
        assert session.is_dismissed("s1-t1")

    def test_hidden_even_if_callback_raises(self, fake_store, store):
        """The store is already linked, so a failing callback must not re-offer it."""
        def explode(suggestion):
            raise RuntimeError("listener failed")

        session = SuggestionSession(fake_store, on_accept=explode)
        suggestion = session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=1,
        )[0]

        with pytest.raises(RuntimeError):
            session.accept(suggestion)

        assert fake_store.calls == [
            ("link_character_to_world", "#ELARA_001", "@VIRELITH_001"),
        ]
        assert session.is_dismissed(suggestion.id)
        visible = session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=5,
        )
        assert suggestion.id not in [s.id for s in visible]


class TestListing:
    """Tests for SuggestionSession.suggestions."""

    def test_global_listing(self, fake_store, store):
        session = SuggestionSession(fake_store)
        visible = session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=3,
        )
        assert [s.id for s in visible] == [
            "#ELARA_001-@VIRELITH_001",
            "@MERIDIAN_002-$STORY_002",
            "#MARCUS_002-$STORY_002",
        ]

    def test_dismissed_replaced(self, fake_store, store):
        session = SuggestionSession(fake_store)
        session.dismiss("#ELARA_001-@VIRELITH_001")
        visible = session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=3,
        )
        assert len(visible) == 3
        assert "#ELARA_001-@VIRELITH_001" not in [s.id for s in visible]
        assert visible[-1].id == "@VIRELITH_001-$STORY_001"

    def test_entity_listing(self, fake_store, store):
        session = SuggestionSession(fake_store)
        visible = session.suggestions(
            store["characters"], store["worlds"], store["projects"],
            entity_id="#ELARA_001", entity_type="character",
        )
        assert [s.target_id for s in visible] == ["@VIRELITH_001", "$STORY_001"]

    def test_zero_limit(self, fake_store, store):
        session = SuggestionSession(fake_store)
        assert session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=0,
        ) == []

    def test_reset(self, fake_store, store):
        session = SuggestionSession(fake_store)
        session.dismiss("#ELARA_001-@VIRELITH_001")
        session.reset()
        assert session.dismissed == frozenset()
        visible = session.suggestions(
            store["characters"], store["worlds"], store["projects"], limit=1,
        )
        assert visible[0].id == "#ELARA_001-@VIRELITH_001"


class TestConfidenceBand:
    """Tests for confidence_band."""

    @pytest.mark.parametrize("confidence, band", [
        (1.0, "high"), (0.7, "high"), (0.69, "medium"), (0.5, "medium"), (0.3, "low"),
    ])
    def test_bands(self, confidence, band):
        assert confidence_band(confidence) == band
