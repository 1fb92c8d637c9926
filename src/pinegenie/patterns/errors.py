"""Custom exceptions for the strategy pattern catalog."""


class PatternCatalogError(ValueError):
    """Raised when pattern catalog constraints are violated."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code
