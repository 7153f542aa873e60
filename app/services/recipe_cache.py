"""Stores for translated recipes, keyed by provider recipe identifier."""
import json
import logging
import threading
import time
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app import db
from app.errors import StoreUnavailable
from app.models import TranslatedRecipe
from app.services.recipe_record import RecipeRecord

logger = logging.getLogger(__name__)


class RecipeCacheStore:
    """
    Database-backed cache of translated recipes.

    Must be used inside a Flask application context. With ``ttl`` unset,
    entries are permanent: written once and never updated. With ``ttl``
    (seconds) older entries read as a miss and the next ``put`` replaces them.
    Entries stored for a different ``target_lang`` are treated the same way.
    """

    def __init__(self, target_lang='pt', ttl=None):
        self.target_lang = target_lang
        self.ttl = ttl or None

    def _is_expired(self, entry) -> bool:
        if self.ttl is None or entry.created_at is None:
            return False
        return entry.created_at + timedelta(seconds=self.ttl) < datetime.utcnow()

    def _is_stale(self, entry) -> bool:
        # Entries translated into another language are replaced like expired ones
        return entry.target_lang != self.target_lang or self._is_expired(entry)

    @staticmethod
    def _is_readable(entry) -> bool:
        try:
            RecipeRecord.from_json(entry.payload)
        except ValueError:
            return False
        return True

    def get(self, recipe_id):
        """Return the cached ``RecipeRecord`` or None on a miss."""
        try:
            entry = TranslatedRecipe.query.filter_by(recipe_id=str(recipe_id)).first()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error("Recipe cache read failed for %s: %s", recipe_id, e)
            raise StoreUnavailable(f"Cache read failed for {recipe_id}") from e

        if entry is None or self._is_stale(entry):
            return None

        try:
            return RecipeRecord.from_json(entry.payload)
        except ValueError as e:
            logger.warning("Ignoring unreadable cache entry for %s: %s", recipe_id, e)
            return None

    def put(self, recipe_id, record: RecipeRecord):
        """
        Store a translated record.

        A concurrent writer may have inserted the same id first; the unique
        constraint rejects our insert and that outcome is accepted as-is.
        """
        recipe_id = str(recipe_id)
        try:
            entry = TranslatedRecipe.query.filter_by(recipe_id=recipe_id).first()
            if entry is not None and not self._is_stale(entry) and self._is_readable(entry):
                return

            if entry is None:
                entry = TranslatedRecipe(recipe_id=recipe_id)
                db.session.add(entry)
            entry.target_lang = self.target_lang
            entry.payload = record.to_json()
            entry.created_at = datetime.utcnow()
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.info("Recipe %s was cached by a concurrent request", recipe_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreUnavailable(f"Cache write failed for {recipe_id}") from e


class InMemoryRecipeCache:
    """
    Process-local cache of translated recipes with an optional TTL.

    Suitable for a single worker process; entries are lost on restart.
    """

    def __init__(self, ttl=None):
        self.ttl = ttl or None
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, recipe_id):
        with self._lock:
            entry = self._entries.get(str(recipe_id))
            if entry is None:
                return None
            stored_at, payload = entry
            if self.ttl is not None and time.monotonic() - stored_at > self.ttl:
                del self._entries[str(recipe_id)]
                return None
        return RecipeRecord.from_dict(json.loads(payload))

    def put(self, recipe_id, record: RecipeRecord):
        with self._lock:
            self._entries[str(recipe_id)] = (time.monotonic(), record.to_json())

    def __len__(self):
        with self._lock:
            return len(self._entries)
