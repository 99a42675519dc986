"""
Tests for creator_engine/keywords.py and keyword_similarity.

Validates:
    - Lowercasing, punctuation stripping and short-word/stopword filtering
    - Order of first appearance is kept, duplicates are kept
    - The list is capped at MAX_KEYWORDS
    - Jaccard similarity over keyword sets
"""

import pytest

from creator_engine.keywords import MAX_KEYWORDS, extract_keywords
from creator_engine.similarity import keyword_similarity


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_empty_and_none(self):
        """Missing text yields no keywords."""
        assert extract_keywords("") == []
        assert extract_keywords(None) == []

    def test_strips_punctuation_inside_words(self):
        """Hyphens and punctuation are removed, joining word parts."""
        assert extract_keywords("The storm-wracked citadel of Virelith") == [
            "stormwracked", "citadel", "virelith",
        ]

    def test_drops_short_words_and_stopwords(self):
        """Tokens of three characters or fewer and stopwords are dropped."""
        assert extract_keywords("She was the one who could fly over them") == ["over"]

    def test_keeps_digits(self):
        """Digits are word characters."""
        assert extract_keywords("Sector 7G2 holds 1000 ships") == [
            "sector", "holds", "1000", "ships",
        ]

    def test_keeps_order_and_duplicates(self):
        """Keywords appear in text order; repeats are not collapsed."""
        assert extract_keywords("Dragon riders love dragon eggs") == [
            "dragon", "riders", "love", "dragon", "eggs",
        ]

    def test_capped_at_max_keywords(self):
        """Only the first MAX_KEYWORDS keywords are kept."""
        text = " ".join(f"word{i:03d}" for i in range(50))
        keywords = extract_keywords(text)
        assert len(keywords) == MAX_KEYWORDS
        assert keywords[0] == "word000"
        assert keywords[-1] == f"word{MAX_KEYWORDS - 1:03d}"


class TestKeywordSimilarity:
    """Tests for keyword_similarity."""

    def test_empty_side_is_zero(self):
        assert keyword_similarity([], ["dragon"]) == 0.0
        assert keyword_similarity(["dragon"], []) == 0.0

    def test_identical_sets(self):
        assert keyword_similarity(["dragon", "riders"], ["riders", "dragon"]) == 1.0

    def test_disjoint_sets(self):
        assert keyword_similarity(["dragon"], ["ocean"]) == 0.0

    def test_jaccard_ratio(self):
        """Two shared keywords out of six distinct give one third."""
        a = ["dragon", "riders", "guard", "mountain"]
        b = ["dragon", "riders", "sail", "oceans"]
        assert keyword_similarity(a, b) == pytest.approx(1 / 3)

    def test_duplicates_use_set_semantics(self):
        """Repeated keywords count once."""
        assert keyword_similarity(["dragon", "dragon"], ["dragon"]) == 1.0

    @pytest.mark.parametrize("a, b", [
        (["dragon", "riders", "guard"], ["dragon"]),
        (["dragon", "dragon", "riders"], ["riders", "oceans", "oceans", "sail"]),
        (["alpha"], ["alpha", "bravo", "charlie", "delta", "echo"]),
        ([], ["dragon"]),
    ])
    def test_symmetric(self, a, b):
        """Swapping the arguments never changes the result."""
        assert keyword_similarity(a, b) == keyword_similarity(b, a)
