"""Error taxonomy for the recipe translation proxy.

Leaf clients raise these directly; routes map ``status_code`` onto the HTTP
response and return ``message`` as the error body. The message is a fixed
string so provider or driver detail never reaches the client.
"""


class RecipeServiceError(Exception):
    """Base class for failures while serving a translated recipe."""

    status_code = 500
    message = 'Recipe service error'


class RecipeNotFound(RecipeServiceError):
    """The recipe identifier does not exist at the recipe provider."""

    status_code = 404
    message = 'Recipe not found'


class UpstreamUnavailable(RecipeServiceError):
    """An external provider could not be reached or answered with an error."""

    message = 'Upstream service unavailable'


class SourceUnavailable(UpstreamUnavailable):
    message = 'Recipe provider unavailable'


class TranslationUnavailable(UpstreamUnavailable):
    message = 'Translation service unavailable'


class StoreUnavailable(RecipeServiceError):
    """The translated-recipe cache could not be read or written."""

    message = 'Recipe cache unavailable'
