"""Relevance ranking of food database hints against the search query."""

from mealcoach.services.translation import looks_like_provider_language

# Maximum number of results returned to the client
MAX_RESULTS = 5

EXACT_MATCH_SCORE = 100
SUBSTRING_MATCH_SCORE = 50
WORD_MATCH_SCORE = 25
MIN_WORD_LENGTH = 3  # shorter query words are ignored


def preferred_label(hint: dict) -> str:
    """The hint's alternate "known as" name if present, else its label."""
    food = (hint or {}).get('food') or {}
    return food.get('knownAs') or food.get('label') or ''


def score_hint(hint: dict, translated_query: str) -> int:
    """
    Score one hint, case-insensitively.

    exact match = 100, query is a substring = 50, otherwise 25 per query word
    (3+ characters) found in the label. No match = 0.
    """
    if not hint or not hint.get('food'):
        return 0

    label = preferred_label(hint).lower()
    query = translated_query.lower()

    if label == query:
        return EXACT_MATCH_SCORE
    if query and query in label:
        return SUBSTRING_MATCH_SCORE

    score = 0
    for word in query.split():
        if len(word) >= MIN_WORD_LENGTH and word in label:
            score += WORD_MATCH_SCORE
    return score


def rank(hints: list, original_query: str, translated_query: str, limit: int = MAX_RESULTS) -> list:
    """
    Sort hints by descending score and keep the first `limit`.

    The sort is stable, so equal scores keep the provider's order. Scores are
    computed against translated_query only.
    """
    if not hints:
        return []

    scored = [(hint, score_hint(hint, translated_query)) for hint in hints]
    scored.sort(key=lambda item: item[1], reverse=True)
    return [hint for hint, _ in scored[:limit]]


def is_degenerate_translation(original_query: str, translated_query: str) -> bool:
    """
    True when translation left a non-English query untouched.

    Searching the food database with untranslated Japanese yields nothing
    useful, so callers return no results instead.
    """
    return translated_query == original_query and not looks_like_provider_language(original_query)
