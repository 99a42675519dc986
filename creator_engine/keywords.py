"""
creator_engine/keywords.py -- Keyword extraction for content matching.

Turns free-text entity fields into a short, bounded list of content words.
Tokens keep their order of first appearance (they are not frequency ranked)
and the list is cut at :data:`MAX_KEYWORDS` so that one long backstory does
not dominate a comparison.

Usage::

    from creator_engine.keywords import extract_keywords

    extract_keywords("The storm-wracked citadel of Virelith")
    # -> ["stormwracked", "citadel", "virelith"]
"""

import re

MIN_KEYWORD_LENGTH = 4
MAX_KEYWORDS = 30

STOPWORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could",
    "should", "may", "might", "must", "shall", "can", "need", "dare",
    "ought", "used", "to", "of", "in", "for", "on", "with", "at", "by",
    "from", "as", "into", "through", "during", "before", "after", "above",
    "below", "between", "under", "again", "further", "then", "once", "here",
    "there", "when", "where", "why", "how", "all", "each", "few", "more",
    "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "just", "and", "but", "if", "or",
    "because", "while", "although", "this", "that", "these", "those", "i",
    "me", "my", "myself", "we", "our", "ours", "you", "your", "he", "him",
    "his", "she", "her", "it", "its", "they", "them", "their", "what",
    "which", "who", "whom",
})

_STRIP_RE = re.compile(r"[^a-z0-9\s]")


def extract_keywords(text: str | None) -> list[str]:
    """Return the first 30 lowercase content words of *text*.

    Characters outside ``[a-z0-9]`` and whitespace are removed (so
    ``"storm-wracked"`` becomes ``"stormwracked"``), then tokens of three
    characters or fewer and stopwords are dropped.  Duplicates are kept;
    callers that need set semantics convert the result themselves.
    """
    if not text:
        return []

    cleaned = _STRIP_RE.sub("", text.lower())
    keywords = [
        word for word in cleaned.split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOPWORDS
    ]
    return keywords[:MAX_KEYWORDS]
