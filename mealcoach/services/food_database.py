"""Client for the Edamam food database parser API."""
import logging

import requests

logger = logging.getLogger(__name__)

EDAMAM_API_URL = 'https://api.edamam.com/api/food-database/v2/parser'
DEFAULT_TIMEOUT = 10  # seconds


class MissingCredentialsError(Exception):
    """Raised when the Edamam app id or app key is not configured."""

    def __init__(self, message: str = 'Edamam API credentials are not configured'):
        self.message = message
        super().__init__(self.message)


class FoodDatabaseError(Exception):
    """Raised when a food database lookup fails.

    status_code is None for network errors and timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ''):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(self.message)

    def __str__(self):
        if self.status_code is not None:
            return f"{self.message} (status={self.status_code}, body={self.body[:200]!r})"
        return self.message


class FoodDatabaseClient:
    """Looks up foods by an (already translated) English query. No retries."""

    def __init__(self, app_id: str | None, app_key: str | None, api_url: str = EDAMAM_API_URL,
                 timeout: float = DEFAULT_TIMEOUT):
        if not app_id or not app_key:
            raise MissingCredentialsError()
        self.app_id = app_id
        self.app_key = app_key
        self.api_url = api_url
        self.timeout = timeout

    def search(self, query: str) -> list[dict]:
        """Return the provider's list of hints for the query."""
        params = {
            'app_id': self.app_id,
            'app_key': self.app_key,
            'ingr': query,
        }

        try:
            response = requests.get(
                self.api_url,
                params=params,
                headers={'Accept': 'application/json'},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise FoodDatabaseError(f"Edamam request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise FoodDatabaseError(f"Edamam request failed: {e}") from e

        if not response.ok:
            raise FoodDatabaseError(
                'Edamam request failed',
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise FoodDatabaseError('Edamam returned invalid JSON', status_code=response.status_code) from e

        hints = data.get('hints') if isinstance(data, dict) else None
        logger.debug(f"Edamam returned {len(hints or [])} hints for {query!r}")
        return hints or []
