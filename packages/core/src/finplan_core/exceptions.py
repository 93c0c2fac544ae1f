"""Custom exceptions for finplan-core.

This module provides a small hierarchy of exception classes for the
calculation engines and their callers. All exceptions inherit from
FinPlanError, making it easy to catch every library-specific error.

The engines favour numeric results over exceptions: an unreachable payoff
is reported through a ``None`` sentinel, and a capped simulation simply
stops. Exceptions are reserved for inputs that cannot produce a number at
all (division by zero) and for rejected caller input.

Example:
    try:
        results = calculate_mortgage(inputs)
    except DegenerateInputError as e:
        # loan_amount was zero; ask the user for a sale price
        show_field_error(e.field, e.message)
    except FinPlanError as e:
        logger.error("mortgage_failed", error=str(e))
"""

from typing import Any, Optional


class FinPlanError(Exception):
    """Base exception for all finplan-core errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise FinPlanError("Something went wrong", details={"code": 500})
        FinPlanError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize FinPlanError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error can be fixed by the caller
                (for example by correcting input). Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(FinPlanError):
    """Error raised when caller-supplied data fails validation.

    Raised for out-of-range amounts, rates or terms, and for unknown
    enumeration values such as a payoff strategy name.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Loan term must be between 1 and 50 years",
        ...     field="loan_term_years",
        ...     value=0,
        ...     constraint="1 <= loan_term_years <= 50",
        ... )
        ValidationError: Loan term must be between 1 and 50 years
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class DegenerateInputError(ValidationError):
    """Error raised when inputs would make a formula divide by zero.

    The plain formulas would yield NaN or Infinity for these inputs, e.g. a
    zero sale price when computing the down payment percentage, or a 100%
    down payment in the affordability solver.

    Example:
        >>> raise DegenerateInputError(
        ...     "Loan amount must be greater than zero",
        ...     field="loan_amount",
        ...     value=0,
        ... )
        DegenerateInputError: Loan amount must be greater than zero
    """


class ConfigurationError(FinPlanError):
    """Error raised when engine configuration is invalid.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Payoff cap must be positive",
        ...     config_key="FINPLAN_ENGINE_PAYOFF_MAX_MONTHS",
        ...     expected="integer > 0",
        ... )
        ConfigurationError: Payoff cap must be positive
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "FinPlanError",
    "ValidationError",
    "DegenerateInputError",
    "ConfigurationError",
]
