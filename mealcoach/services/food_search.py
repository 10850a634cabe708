"""Food search pipeline: translate query, look up, rank, translate labels back."""
import logging
import time
from concurrent.futures import ThreadPoolExecutor

from mealcoach.services.relevance import MAX_RESULTS, is_degenerate_translation, preferred_label, rank

logger = logging.getLogger(__name__)

NUTRIENT_KEYS = ('ENERC_KCAL', 'PROCNT', 'FAT', 'CHOCDF')


def build_candidate(hint: dict, label: str, original_query: str) -> dict:
    """Build the FoodCandidate dict returned to the client."""
    food = hint.get('food') or {}
    nutrients = food.get('nutrients') or {}
    original_label = preferred_label(hint)

    return {
        'foodId': food.get('foodId') or f'food_{int(time.time() * 1000)}',
        'label': label or original_label,
        'originalLabel': original_label,
        'originalQuery': original_query,
        'nutrients': {key: nutrients.get(key) or 0 for key in NUTRIENT_KEYS},
    }


def remove_duplicates(foods: list[dict]) -> list[dict]:
    """Drop foods with the same label and the same rounded nutrient values, keeping order."""
    seen = set()
    unique = []
    for food in foods:
        nutrients = food['nutrients']
        key = (food['label'],) + tuple(round(nutrients[k]) for k in NUTRIENT_KEYS)
        if key in seen:
            continue
        seen.add(key)
        unique.append(food)
    return unique


class FoodSearchService:
    """
    Orchestrates one food search.

    Translation failures are absorbed by the translator. Food database errors
    propagate to the caller, since there is no fallback for them.
    """

    def __init__(self, translator, client, max_workers: int = MAX_RESULTS):
        self.translator = translator
        self.client = client
        self.max_workers = max_workers

    def search(self, query: str) -> list[dict]:
        translated_query = self.translator.translate_to_provider_language(query)

        if is_degenerate_translation(query, translated_query):
            logger.info(f'Query "{query}" could not be translated - returning no results')
            return []

        logger.info(f'Searching food database: "{query}" -> "{translated_query}"')
        hints = self.client.search(translated_query)
        if not hints:
            return []

        ranked = rank(hints, query, translated_query)
        foods = self._translate_labels(ranked, query)
        return remove_duplicates(foods)

    def _translate_labels(self, hints: list, original_query: str) -> list[dict]:
        """Translate each surviving label concurrently; results keep ranking order."""
        hints = [hint for hint in hints if hint and hint.get('food')]
        if not hints:
            return []

        workers = min(self.max_workers, len(hints))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.translator.translate_to_display_language, preferred_label(hint))
                for hint in hints
            ]

            foods = []
            for hint, future in zip(hints, futures):
                try:
                    label = future.result()
                except Exception as e:
                    logger.warning(f'Label translation failed for {preferred_label(hint)!r}: {e}')
                    label = preferred_label(hint)
                foods.append(build_candidate(hint, label, original_query))

        return foods
