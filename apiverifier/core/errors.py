"""
Errors raised while declaring or extracting request parameters.
"""


class ConfigurationError(ValueError):
    """Raised when a parameter specification is malformed (bad grammar, unknown type, bad shape)."""

    pass


class ExtractionError(ValueError):
    """Raised when request params cannot be extracted because of a broken endpoint configuration."""

    pass
