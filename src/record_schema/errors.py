"""Exceptions raised for programmer errors (bad schemas), never for bad data."""


class SchemaError(ValueError):
    """A schema or field spec is malformed."""


class SchemaResolutionError(SchemaError):
    """A string schema reference could not be resolved."""
