class GenerationError(Exception):
    """Text or image provider failed, or answered without the expected payload."""


class ConfigurationError(GenerationError):
    """A required provider setting (API key) is missing."""
