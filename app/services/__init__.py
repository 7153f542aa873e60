"""Service layer: account store and the translated-recipe proxy collaborators."""
