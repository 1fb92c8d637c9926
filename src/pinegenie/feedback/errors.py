"""Custom exceptions for strategy feedback."""


class FeedbackError(Exception):
    """Base exception for strategy feedback."""


class FeedbackConfigError(FeedbackError, ValueError):
    """Raised when feedback thresholds or config files are invalid."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code
