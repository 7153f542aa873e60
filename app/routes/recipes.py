"""Translated recipe lookup route."""

from flask import Blueprint, jsonify, current_app
from app.errors import RecipeNotFound, RecipeServiceError

recipes_bp = Blueprint('recipes', __name__)


def get_recipe_translator():
    return current_app.extensions['recipe_translator']


@recipes_bp.route('/<recipe_id>', methods=['GET'])
def get_recipe(recipe_id):
    """Get a recipe translated into the configured target language.

    Served from the translated-recipe cache when present; otherwise fetched
    from the recipe provider, translated and cached.
    """
    try:
        recipe = get_recipe_translator().get_translated_recipe(recipe_id)
    except RecipeNotFound as e:
        return jsonify({'error': e.message}), e.status_code
    except RecipeServiceError as e:
        current_app.logger.error(f"Recipe {recipe_id} failed: {type(e).__name__}: {e}")
        return jsonify({'error': e.message}), e.status_code

    return jsonify(recipe.to_dict()), 200
