"""Domain errors for BAC estimation."""


class InvalidInput(ValueError):
    """Raised when a drink or profile value is outside its valid range."""
