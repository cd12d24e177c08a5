"""Exceptions raised by dynquery."""


class DynQueryError(Exception):
    """Base class for dynquery errors."""


class ExpressionError(DynQueryError):
    """Raised when a filter expression cannot be parsed or compiled."""

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)
