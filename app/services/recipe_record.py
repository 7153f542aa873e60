"""Recipe record as returned by the recipe provider (TheMealDB shape)."""

import json

# Number of numbered ingredient fields the provider exposes per recipe
INGREDIENT_SLOTS = 20

ID_FIELD = 'idMeal'
NAME_FIELD = 'strMeal'
INSTRUCTIONS_FIELD = 'strInstructions'
INGREDIENT_FIELD = 'strIngredient{}'


def ingredient_field(slot: int) -> str:
    """Field name of ingredient slot ``slot`` (1-based)."""
    if not 1 <= slot <= INGREDIENT_SLOTS:
        raise ValueError(f"Ingredient slot must be between 1 and {INGREDIENT_SLOTS}")
    return INGREDIENT_FIELD.format(slot)


def _is_present(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


class RecipeRecord:
    """
    A recipe keyed by its provider identifier.

    The raw provider object is kept as-is, so every field that is not
    translated (image URL, category, measures, ...) survives verbatim and
    in its original key order. Translated records are the same type with
    the name, instructions and present ingredient slots overwritten.
    """

    def __init__(self, fields: dict):
        self._fields = dict(fields)

    @classmethod
    def from_dict(cls, data: dict) -> 'RecipeRecord':
        if not isinstance(data, dict):
            raise ValueError('Recipe record must be a JSON object')
        return cls(data)

    @classmethod
    def from_json(cls, payload: str) -> 'RecipeRecord':
        return cls.from_dict(json.loads(payload))

    @property
    def recipe_id(self) -> str | None:
        value = self._fields.get(ID_FIELD)
        return str(value) if value is not None else None

    @property
    def name(self) -> str | None:
        return self._fields.get(NAME_FIELD)

    @property
    def instructions(self) -> str | None:
        return self._fields.get(INSTRUCTIONS_FIELD)

    def ingredient(self, slot: int) -> str | None:
        """Text of ingredient ``slot``, or None when the slot is absent."""
        value = self._fields.get(ingredient_field(slot))
        return value if _is_present(value) else None

    @property
    def ingredients(self) -> list:
        """All ingredient slots in order, absent slots as None."""
        return [self.ingredient(slot) for slot in range(1, INGREDIENT_SLOTS + 1)]

    def present_ingredient_slots(self) -> list:
        return [slot for slot in range(1, INGREDIENT_SLOTS + 1) if self.ingredient(slot) is not None]

    def translatable_fields(self) -> list:
        """
        Fields to translate as ``(field_name, text)`` pairs.

        Order is name, instructions, then present ingredient slots by index.
        Name and instructions are skipped only when they are not text at all.
        """
        worklist = []
        for field in (NAME_FIELD, INSTRUCTIONS_FIELD):
            value = self._fields.get(field)
            if isinstance(value, str):
                worklist.append((field, value))
        for slot in self.present_ingredient_slots():
            field = ingredient_field(slot)
            worklist.append((field, self._fields[field]))
        return worklist

    def with_translations(self, translations: dict) -> 'RecipeRecord':
        """Copy of this record with exactly the given fields replaced."""
        allowed = {field for field, _ in self.translatable_fields()}
        unexpected = set(translations) - allowed
        if unexpected:
            raise ValueError(f"Not translatable: {', '.join(sorted(unexpected))}")
        fields = dict(self._fields)
        fields.update(translations)
        return RecipeRecord(fields)

    def to_dict(self) -> dict:
        return dict(self._fields)

    def to_json(self) -> str:
        return json.dumps(self._fields, ensure_ascii=False)

    def __eq__(self, other):
        if not isinstance(other, RecipeRecord):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self):
        return f'<RecipeRecord {self.recipe_id} {self.name!r}>'
