"""Risk calculation error taxonomy.

Every rejection raised by the calculator or a strategy is a typed,
recoverable ``ValueError`` subclass. Callers treat any ``RiskError`` as
"no plan was produced".

Hierarchy:
    RiskError
    ├── InvalidInputError          malformed / out-of-range numeric input
    ├── InvalidStopLossError       stop-loss on the wrong side of entry
    ├── InvalidOrderPlacementError resting order would fill as market
    └── ValidationFailedError      strategy-level wrapper adding context
"""


class RiskError(ValueError):
    """Base exception for all risk calculation errors."""

    pass


class InvalidInputError(RiskError):
    """Numeric input is malformed or outside its allowed range."""

    pass


class InvalidStopLossError(RiskError):
    """Stop-loss price violates the side/entry relationship."""

    pass


class InvalidOrderPlacementError(RiskError):
    """Limit entry price would execute immediately as a market order."""

    pass


class ValidationFailedError(RiskError):
    """Strategy-level validation failure.

    Wraps a calculator error (available as ``cause`` and ``__cause__``) or
    reports an invalid strategy parameter override.

    Example:
        >>> try:
        ...     calculator.validate_inputs(...)
        ... except RiskError as e:
        ...     raise ValidationFailedError("validation failed", cause=e) from e
    """

    def __init__(self, message: str, cause: Exception | None = None):
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.cause = cause


__all__ = [
    "RiskError",
    "InvalidInputError",
    "InvalidStopLossError",
    "InvalidOrderPlacementError",
    "ValidationFailedError",
]
