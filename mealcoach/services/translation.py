"""Query/result translation between the display language and the food database language.

Uses the DeepL API. Translations are cached per direction and failures always
fall back to the original text.
"""
import logging
import re

import requests

from mealcoach.services.translation_cache import TranslationCache

logger = logging.getLogger(__name__)

DEEPL_API_URL = 'https://api-free.deepl.com/v2/translate'
DEFAULT_TIMEOUT = 10  # seconds

# Language codes as DeepL expects them
PROVIDER_LANGUAGE = 'EN'
DISPLAY_LANGUAGE = 'JA'

# ASCII letters, digits and basic punctuation only
PROVIDER_LANGUAGE_PATTERN = re.compile(r'^[a-zA-Z0-9\s.,!?-]*$')
# Hiragana, Katakana, CJK ideographs
DISPLAY_LANGUAGE_SCRIPT_PATTERN = re.compile(r'[぀-ゟ゠-ヿ一-龯]')
# Digits, whitespace and punctuation only - nothing to translate
UNTRANSLATABLE_PATTERN = re.compile(r'^[\d\s.,!?-]+$')

PARENTHESIZED_PATTERN = re.compile(r'\s*\([^)]*\)')
TRAILING_CLAUSE_PATTERN = re.compile(r',.*$', re.DOTALL)
MAX_LABEL_WORDS = 2


def looks_like_provider_language(text: str) -> bool:
    """Conservative check that text is already in the provider's language."""
    return bool(PROVIDER_LANGUAGE_PATTERN.match(text))


def contains_display_language_script(text: str) -> bool:
    """Check whether text already contains Japanese script."""
    return bool(DISPLAY_LANGUAGE_SCRIPT_PATTERN.search(text))


def is_untranslatable(text: str) -> bool:
    """Empty, whitespace-only, or numbers/punctuation only."""
    return not text or not text.strip() or bool(UNTRANSLATABLE_PATTERN.match(text))


def post_process_translation(text: str) -> str:
    """
    Shorten a translated food name.

    - "salmon (any fish of the family Salmonidae)" -> "salmon"
    - "rice, white" -> "rice"
    - more than two words -> first two words

    Food database labels are often long scientific descriptions; only a short
    name is wanted, so the loss is intentional.
    """
    if not text:
        return ''

    processed = PARENTHESIZED_PATTERN.sub('', text)
    processed = TRAILING_CLAUSE_PATTERN.sub('', processed)
    processed = processed.strip()

    words = processed.split(' ')
    if len(words) > MAX_LABEL_WORDS:
        processed = ' '.join(words[:MAX_LABEL_WORDS])

    return processed


class TranslationError(Exception):
    """Raised internally when the translation API call fails."""


class Translator:
    """
    Bidirectional translator with one cache per direction.

    Never raises: every failure is logged, the original text is cached as its
    own translation (so a burst of requests for the same failing string does
    not keep hitting the API) and returned.
    """

    def __init__(
        self,
        api_key: str | None,
        ja_to_en_cache: TranslationCache,
        en_to_ja_cache: TranslationCache,
        api_url: str = DEEPL_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.ja_to_en_cache = ja_to_en_cache
        self.en_to_ja_cache = en_to_ja_cache
        self.api_url = api_url
        self.timeout = timeout

    @property
    def is_enabled(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def translate_to_provider_language(self, text: str) -> str:
        """Translate a user query (JA) to the food database language (EN)."""
        if not text or not text.strip():
            return text

        if looks_like_provider_language(text):
            return text

        return self._translate(text, DISPLAY_LANGUAGE, PROVIDER_LANGUAGE, self.ja_to_en_cache)

    def translate_to_display_language(self, text: str) -> str:
        """Translate a food label (EN) to the display language (JA)."""
        if is_untranslatable(text):
            return text

        if contains_display_language_script(text):
            return text

        return self._translate(text, PROVIDER_LANGUAGE, DISPLAY_LANGUAGE, self.en_to_ja_cache)

    def _translate(self, text: str, source_lang: str, target_lang: str, cache: TranslationCache) -> str:
        cached = cache.get(text)
        if cached is not None:
            return cached

        if not self.is_enabled:
            logger.warning("DEEPL_API_KEY is not set - returning text untranslated")
            cache.set(text, text)
            return text

        try:
            translated = self._call_api(text, source_lang, target_lang)
        except TranslationError as e:
            logger.warning(f"Translation failed [{source_lang}->{target_lang}] for {text!r}: {e}")
            cache.set(text, text)
            return text

        if translated is None:
            logger.warning(f"DeepL returned no translations [{source_lang}->{target_lang}] for {text!r}")
            cache.set(text, text)
            return text

        processed = post_process_translation(translated)
        if not processed:
            logger.warning(f"Translation of {text!r} was empty after post-processing: {translated!r}")
            cache.set(text, text)
            return text

        cache.set(text, processed)
        return processed

    def _call_api(self, text: str, source_lang: str, target_lang: str) -> str | None:
        """Call DeepL. Returns the first translation, or None if the response had none."""
        headers = {
            'Authorization': f'DeepL-Auth-Key {self.api_key}',
            'Content-Type': 'application/json',
        }
        payload = {
            'text': [text],
            'source_lang': source_lang,
            'target_lang': target_lang,
        }

        try:
            response = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.Timeout as e:
            raise TranslationError(f"timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise TranslationError(str(e)) from e

        if not response.ok:
            raise TranslationError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            result = response.json()
        except ValueError as e:
            raise TranslationError("invalid JSON in response") from e

        translations = result.get('translations') if isinstance(result, dict) else None
        if translations is None or translations == []:
            return None
        if not isinstance(translations, list) or not isinstance(translations[0], dict):
            raise TranslationError(f"unexpected response shape: {str(result)[:200]}")

        text = translations[0].get('text')
        if text is not None and not isinstance(text, str):
            raise TranslationError(f"unexpected translation value: {text!r}")
        return text or None
