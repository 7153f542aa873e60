"""
Pytest configuration and fixtures for testing the recipe translation API.
"""

import os
import sys
import threading
import pytest
from faker import Faker

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.errors import RecipeNotFound, StoreUnavailable, TranslationUnavailable
from app.models.user import User
from app.services.recipe_cache import InMemoryRecipeCache
from app.services.recipe_record import RecipeRecord
from app.services.recipe_translator import RecipeTranslator

fake = Faker()


def teriyaki_recipe():
    """Provider record for recipe 52772, trimmed to the interesting fields."""
    fields = {
        'idMeal': '52772',
        'strMeal': 'Teriyaki Chicken Casserole',
        'strCategory': 'Chicken',
        'strArea': 'Japanese',
        'strInstructions': 'Preheat oven to 350 F. Spray a 9x13-inch baking pan with non-stick spray.',
        'strMealThumb': 'https://www.themealdb.com/images/media/meals/wvpsxx1468256321.jpg',
        'strTags': 'Meat,Casserole',
        'strIngredient1': 'soy sauce',
        'strIngredient2': None,
        'strMeasure1': '3/4 cup',
        'strMeasure2': None,
    }
    for slot in range(3, 21):
        fields[f'strIngredient{slot}'] = ''
    return fields


# ---------------------------------------------------------------------------
# Stub collaborators for the recipe translator
# ---------------------------------------------------------------------------

class StubRecipeSource:
    """Serves recipes from a dict and records every lookup."""

    def __init__(self, recipes=None, error=None):
        self.recipes = recipes or {}
        self.error = error
        self.calls = []

    def lookup(self, recipe_id):
        self.calls.append(recipe_id)
        if self.error is not None:
            raise self.error
        if recipe_id not in self.recipes:
            raise RecipeNotFound(recipe_id)
        return RecipeRecord.from_dict(self.recipes[recipe_id])


class UppercaseTranslator:
    """Translates by upper-casing; optionally fails on one input text."""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.calls = []
        self._lock = threading.Lock()

    def translate(self, text, target_lang):
        with self._lock:
            self.calls.append((text, target_lang))
        if text == self.fail_on:
            raise TranslationUnavailable(f'cannot translate {text!r}')
        return text.upper()


class FailingCacheStore:
    """Cache whose reads and/or writes raise StoreUnavailable."""

    def __init__(self, fail_get=False, fail_put=True):
        self.fail_get = fail_get
        self.fail_put = fail_put
        self.put_calls = []

    def get(self, recipe_id):
        if self.fail_get:
            raise StoreUnavailable('read failed')
        return None

    def put(self, recipe_id, record):
        self.put_calls.append(recipe_id)
        if self.fail_put:
            raise StoreUnavailable('write failed')


@pytest.fixture
def recipe_source():
    return StubRecipeSource({'52772': teriyaki_recipe()})


@pytest.fixture
def uppercase_translator():
    return UppercaseTranslator()


@pytest.fixture
def memory_cache():
    return InMemoryRecipeCache()


@pytest.fixture
def recipe_translator(memory_cache, recipe_source, uppercase_translator):
    return RecipeTranslator(memory_cache, recipe_source, uppercase_translator, target_lang='pt')


# ---------------------------------------------------------------------------
# Application fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

    app = create_app('testing', {'JWT_SECRET_KEY': 'test-secret-key-for-testing'})

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def use_recipe_translator(app):
    """Swap the app's recipe translator for one built from stubs."""
    original = app.extensions['recipe_translator']

    def install(translator):
        app.extensions['recipe_translator'] = translator
        return translator

    yield install
    app.extensions['recipe_translator'] = original


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {'email': fake.unique.email()}
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    with app.app_context():
        return _create_user()


@pytest.fixture
def second_user(app, db_session):
    """Create a second test user for interaction tests."""
    with app.app_context():
        return _create_user(password='testpassword456')
