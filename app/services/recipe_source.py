"""Client for the TheMealDB recipe lookup API."""
import logging

import requests

from app.errors import RecipeNotFound, SourceUnavailable
from app.services.recipe_record import RecipeRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://www.themealdb.com/api/json/v1/1'


class MealDbClient:
    """
    Look recipes up by identifier.

    ``lookup`` raises ``RecipeNotFound`` when the provider has no such recipe,
    including malformed identifiers, and ``SourceUnavailable`` for timeouts,
    transport errors, 5xx answers and unreadable bodies.
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, timeout=5.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def lookup(self, recipe_id) -> RecipeRecord:
        url = f'{self.base_url}/lookup.php'
        try:
            response = requests.get(url, params={'i': recipe_id}, timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning("Recipe lookup timeout for %s", recipe_id)
            raise SourceUnavailable(f"Recipe lookup timed out for {recipe_id}") from e
        except requests.RequestException as e:
            logger.warning("Recipe lookup error for %s: %s", recipe_id, e)
            raise SourceUnavailable(f"Recipe lookup failed for {recipe_id}") from e

        if response.status_code >= 500:
            logger.warning("Recipe provider answered HTTP %s for %s", response.status_code, recipe_id)
            raise SourceUnavailable(f"Recipe provider answered HTTP {response.status_code}")

        if response.status_code >= 400:
            raise RecipeNotFound(recipe_id)

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("Recipe provider returned a non-JSON body for %s", recipe_id)
            raise SourceUnavailable('Recipe provider returned invalid JSON') from e

        if not isinstance(payload, dict):
            raise SourceUnavailable('Recipe provider returned an unexpected body')

        meals = payload.get('meals')
        if not meals:
            raise RecipeNotFound(recipe_id)

        meal = meals[0]
        if not isinstance(meal, dict):
            raise SourceUnavailable('Recipe provider returned an unexpected record')
        return RecipeRecord.from_dict(meal)
