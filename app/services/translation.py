"""Translation client with swappable providers and a circuit breaker."""
import logging
import threading
import time

import requests

from app.errors import TranslationUnavailable

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = 'https://translation.googleapis.com/language/translate/v2'
DEEPL_TRANSLATE_URL = 'https://api-free.deepl.com/v2/translate'

# DeepL rejects the bare codes for languages with regional variants
DEEPL_TARGET_OVERRIDES = {'EN': 'EN-US', 'PT': 'PT-BR'}

SUPPORTED_SERVICES = ('google', 'deepl')


class TranslationClient:
    """
    Translate single strings through Google Cloud Translation or DeepL.

    Every failure raises ``TranslationUnavailable``; nothing is retried here.
    After ``max_consecutive_failures`` failures in a row calls fail fast for
    ``cooldown_seconds``. A response saying the API key is invalid disables
    the client until the process restarts.
    """

    def __init__(self, service='google', api_key='', timeout=5.0,
                 max_consecutive_failures=3, cooldown_seconds=300):
        if service not in SUPPORTED_SERVICES:
            raise ValueError(f"Unknown translation service: {service}")
        self.service = service
        self.api_key = (api_key or '').strip()
        self.timeout = timeout
        self.max_consecutive_failures = max_consecutive_failures
        self.cooldown_seconds = cooldown_seconds

        self._lock = threading.Lock()
        self._consecutive_failures = 0
        self._failure_cooldown_until = 0.0
        self._api_key_invalid = False

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def translate(self, text: str, target_lang: str) -> str:
        """
        Translate ``text`` into ``target_lang``.

        Empty or whitespace-only text is returned unchanged without calling
        the provider.
        """
        if not text or not text.strip():
            return text

        if not self.enabled:
            raise TranslationUnavailable(f"{self.service} translation is not configured")

        if self._is_circuit_open():
            raise TranslationUnavailable('Translation circuit open')

        try:
            if self.service == 'google':
                translated = self._google_translate(text, target_lang)
            else:
                translated = self._deepl_translate(text, target_lang)
        except TranslationUnavailable:
            self._record_failure()
            raise

        self._record_success()
        return translated

    # ------------------------------------------------------------------
    # Circuit breaker
    # ------------------------------------------------------------------

    def _is_circuit_open(self) -> bool:
        with self._lock:
            if self._api_key_invalid:
                return True

            if self._consecutive_failures >= self.max_consecutive_failures:
                if time.time() < self._failure_cooldown_until:
                    return True
                self._consecutive_failures = 0
                self._failure_cooldown_until = 0.0
                logger.info("Translation circuit breaker reset, retrying")
            return False

    def _record_success(self):
        with self._lock:
            self._consecutive_failures = 0

    def _record_failure(self, permanent: bool = False):
        with self._lock:
            if permanent:
                self._api_key_invalid = True
                logger.error(
                    "%s API key is INVALID. Translation is now DISABLED.", self.service
                )
                return

            self._consecutive_failures += 1
            if self._consecutive_failures >= self.max_consecutive_failures:
                self._failure_cooldown_until = time.time() + self.cooldown_seconds
                logger.warning(
                    "Translation failed %d times in a row. Pausing for %ds.",
                    self._consecutive_failures, self.cooldown_seconds,
                )

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------

    def _post(self, url, **kwargs):
        try:
            response = requests.post(url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.warning("%s translate timeout", self.service)
            raise TranslationUnavailable(f"{self.service} timeout") from e
        except requests.RequestException as e:
            logger.warning("%s translate error: %s", self.service, e)
            raise TranslationUnavailable(f"{self.service} request failed") from e
        return response

    def _json(self, response) -> dict:
        try:
            result = response.json()
        except ValueError as e:
            logger.warning("%s returned a non-JSON response (HTTP %s)", self.service, response.status_code)
            raise TranslationUnavailable(f"{self.service} returned invalid JSON") from e
        if not isinstance(result, dict):
            raise TranslationUnavailable(f"{self.service} unexpected response format")
        return result

    def _google_translate(self, text: str, target_lang: str) -> str:
        """Translate using Google Cloud Translation API v2."""
        response = self._post(GOOGLE_TRANSLATE_URL, data={
            'key': self.api_key,
            'q': text,
            'target': target_lang.lower(),
            'format': 'text',
        })
        result = self._json(response)

        if response.ok and isinstance(result.get('data'), dict) and 'translations' in result['data']:
            try:
                return result['data']['translations'][0]['translatedText']
            except (IndexError, KeyError, TypeError) as e:
                raise TranslationUnavailable('Google Translate unexpected response format') from e

        error = result.get('error')
        if isinstance(error, dict):
            details = error.get('details')
            if not isinstance(details, list):
                details = []
            for detail in details:
                if isinstance(detail, dict) and detail.get('reason') == 'API_KEY_INVALID':
                    self._record_failure(permanent=True)
                    raise TranslationUnavailable('Google Translate API key invalid')
            logger.warning("Google Translate error: %s", error.get('message', 'unknown'))
            raise TranslationUnavailable('Google Translate error')

        logger.warning("Google Translate unexpected response format (HTTP %s)", response.status_code)
        raise TranslationUnavailable('Google Translate unexpected response format')

    def _deepl_translate(self, text: str, target_lang: str) -> str:
        """Translate using DeepL API."""
        target = target_lang.upper()
        target = DEEPL_TARGET_OVERRIDES.get(target, target)

        response = self._post(
            DEEPL_TRANSLATE_URL,
            headers={'Authorization': f'DeepL-Auth-Key {self.api_key}'},
            data={'text': [text], 'target_lang': target},
        )

        if response.status_code == 403:
            self._record_failure(permanent=True)
            raise TranslationUnavailable('DeepL API key invalid')

        result = self._json(response)
        if response.ok and 'translations' in result:
            try:
                return result['translations'][0]['text']
            except (IndexError, KeyError, TypeError) as e:
                raise TranslationUnavailable('DeepL unexpected response format') from e

        logger.warning("DeepL error (HTTP %s): %s", response.status_code, result.get('message', 'unknown'))
        raise TranslationUnavailable('DeepL error')
