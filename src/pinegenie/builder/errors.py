"""Custom exceptions for strategy graph loading."""


class GraphError(Exception):
    """Base exception for strategy graph handling."""


class GraphSchemaError(GraphError):
    """Raised when a strategy graph payload fails schema validation."""
