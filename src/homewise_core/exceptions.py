"""Custom exceptions for the Homewise finance core.

This module provides a hierarchy of exception classes for consistent error
handling across the engines. All exceptions inherit from HomewiseError,
making it easy to catch all library-specific errors.

Numeric input never raises: malformed numbers are coerced to safe defaults
and produce degenerate results. These exceptions signal structural misuse
only, such as an unknown rehearsal mode or a forbidden ledger operation.

Example:
    try:
        entry = record_withdrawal(bucket, 120.0, date="2025-03-01", note="")
    except LedgerPolicyError as e:
        # Ask the user for a note and try again
        prompt_for(e.field)
    except HomewiseError as e:
        logger.error("operation_failed", error=str(e))
"""

from typing import Any, Optional


class HomewiseError(Exception):
    """Base exception for all Homewise errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise HomewiseError("Something went wrong", details={"code": 500})
        HomewiseError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize HomewiseError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                user correction. Defaults to False.
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


class ValidationError(HomewiseError):
    """Error raised when a structural input is invalid.

    Attributes:
        field: The field that failed validation.
        value: The invalid value.
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Unknown rehearsal mode",
        ...     field="mode",
        ...     value="auction",
        ...     constraint="Must be one of: clarify, location, offer",
        ... )
        ValidationError: Unknown rehearsal mode
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


class LedgerPolicyError(ValidationError):
    """Error raised when a reserve withdrawal breaks the ledger policy.

    Ledger-backed buckets only release funds through a dated, annotated,
    positive withdrawal entry.
    """


class ChargeTransitionError(ValidationError):
    """Error raised when a charge is moved to a status it cannot reach.

    Attributes:
        current: Status the charge currently holds.
        requested: Status that was requested.
    """

    def __init__(
        self,
        message: str,
        *,
        current: Optional[str] = None,
        requested: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            field="status",
            value=requested,
            details=details,
        )
        self.current = current
        self.requested = requested
        if current:
            self.details["current"] = current


class ConfigurationError(HomewiseError):
    """Error raised when configuration is invalid.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid log level",
        ...     config_key="HOMEWISE_LOG_LEVEL",
        ...     expected="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
        ...     actual="LOUD",
        ... )
        ConfigurationError: Invalid log level
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
    "HomewiseError",
    "ValidationError",
    "LedgerPolicyError",
    "ChargeTransitionError",
    "ConfigurationError",
]
