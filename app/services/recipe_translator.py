"""Translated-recipe proxy: cache lookup, provider fetch, translation fan-out."""
import concurrent.futures
import logging

from app.errors import StoreUnavailable, TranslationUnavailable
from app.services.recipe_record import RecipeRecord

logger = logging.getLogger(__name__)


class RecipeTranslator:
    """
    Serve recipes translated into one target language.

    Collaborators are injected:
    - ``cache``: ``get(id) -> RecipeRecord | None`` and ``put(id, record)``
    - ``source``: ``lookup(id) -> RecipeRecord``
    - ``translator``: ``translate(text, target_lang) -> str``

    No state is kept between calls, so one instance serves concurrent
    requests. Two concurrent misses for the same id both do the work and
    both write to the cache.
    """

    def __init__(self, cache, source, translator, target_lang='pt', max_workers=8):
        self.cache = cache
        self.source = source
        self.translator = translator
        self.target_lang = target_lang
        self.max_workers = max(1, max_workers)

    def get_translated_recipe(self, recipe_id) -> RecipeRecord:
        """
        Return the translated recipe for ``recipe_id``.

        Raises:
            RecipeNotFound: the provider has no such recipe
            SourceUnavailable: the provider could not be reached
            TranslationUnavailable: any field failed to translate
            StoreUnavailable: the cache could not be read
        """
        recipe_id = str(recipe_id).strip()

        cached = self.cache.get(recipe_id)
        if cached is not None:
            logger.info("Recipe cache hit for %s", recipe_id)
            return cached

        logger.info("Recipe cache miss for %s, fetching from provider", recipe_id)
        recipe = self.source.lookup(recipe_id)

        translations = self._translate_fields(recipe.translatable_fields())
        translated = recipe.with_translations(translations)

        try:
            self.cache.put(recipe_id, translated)
        except StoreUnavailable as e:
            # The response still goes out; the next request just translates again
            logger.warning("Could not cache translated recipe %s: %s", recipe_id, e)

        return translated

    def _translate_fields(self, worklist) -> dict:
        """
        Translate ``(field, text)`` pairs concurrently.

        Returns a mapping of field name to translated text. The first failure
        cancels work not yet started and raises ``TranslationUnavailable``;
        no partial result escapes.
        """
        if not worklist:
            return {}

        workers = min(self.max_workers, len(worklist))
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix='recipe-translate'
        )
        futures = {
            executor.submit(self.translator.translate, text, self.target_lang): field
            for field, text in worklist
        }
        translations = {}
        try:
            for future in concurrent.futures.as_completed(futures):
                field = futures[future]
                try:
                    translations[field] = future.result()
                except TranslationUnavailable:
                    logger.warning("Translation of %s failed, aborting recipe", field)
                    raise
                except Exception as e:
                    logger.exception("Unexpected error translating %s", field)
                    raise TranslationUnavailable(f"Translation of {field} failed") from e
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return translations


def build_recipe_translator(config) -> RecipeTranslator:
    """Construct the translator and its collaborators from app config."""
    from app.services.recipe_cache import InMemoryRecipeCache, RecipeCacheStore
    from app.services.recipe_source import MealDbClient
    from app.services.translation import TranslationClient

    target_lang = config['TRANSLATION_TARGET_LANG']
    service = config['TRANSLATION_SERVICE']
    api_key = config['DEEPL_API_KEY'] if service == 'deepl' else config['GOOGLE_TRANSLATE_API_KEY']

    translator = TranslationClient(
        service=service,
        api_key=api_key,
        timeout=config['TRANSLATION_TIMEOUT'],
    )
    if not translator.enabled:
        logger.warning("No API key for %s translation; recipe requests will fail", service)

    source = MealDbClient(
        base_url=config['RECIPE_SOURCE_URL'],
        timeout=config['RECIPE_SOURCE_TIMEOUT'],
    )

    backend = config['RECIPE_CACHE_BACKEND']
    if backend == 'memory':
        cache = InMemoryRecipeCache(ttl=config['RECIPE_CACHE_TTL'])
    elif backend == 'database':
        cache = RecipeCacheStore(target_lang=target_lang, ttl=config['RECIPE_CACHE_TTL'])
    else:
        raise ValueError(f"Unknown recipe cache backend: {backend}")

    return RecipeTranslator(
        cache=cache,
        source=source,
        translator=translator,
        target_lang=target_lang,
        max_workers=config['TRANSLATION_MAX_WORKERS'],
    )
