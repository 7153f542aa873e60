"""Translated recipe model: the cache of recipes already run through translation."""
from datetime import datetime

from app import db


class TranslatedRecipe(db.Model):
    """One translated recipe per provider recipe identifier."""
    __tablename__ = 'translated_recipes'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.String(32), unique=True, nullable=False, index=True)
    target_lang = db.Column(db.String(10), nullable=False)
    payload = db.Column(db.Text, nullable=False)  # JSON of the translated record
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<TranslatedRecipe {self.recipe_id} ({self.target_lang})>'
