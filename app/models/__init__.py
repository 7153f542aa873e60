"""Database models for the recipe translation backend."""

from .user import User
from .translated_recipe import TranslatedRecipe

__all__ = ['User', 'TranslatedRecipe']
