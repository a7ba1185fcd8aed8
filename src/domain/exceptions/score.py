"""Score-related domain exceptions."""

from .base import DomainException


class InvalidScoreRequestException(DomainException):
    """Raised when a scoring request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_SCORE_REQUEST",
        )


class ScoreHistoryUnavailableException(DomainException):
    """Raised when the score history store cannot be read or written."""

    def __init__(self, operation: str, message: str = "Score history store is unavailable"):
        super().__init__(
            message=message,
            code="SCORE_HISTORY_UNAVAILABLE",
        )
        self.operation = operation
