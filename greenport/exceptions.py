"""GreenPort Exception Hierarchy.

This module provides the exception hierarchy for the GreenPort PIECE engine with
rich error context for debugging, monitoring, and API responses.

Exception Hierarchy:
    GreenPortException (base)
    ├── ValidationError
    ├── AssumptionLoadError
    ├── ProfileError
    ├── CalculationError
    └── CalculationInProgressError

All exceptions include rich context:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from greenport.exceptions import ValidationError
    >>> raise ValidationError(
    ...     message="terminals[0].annual_teu must be non-negative.",
    ...     invalid_fields={"terminals[0].annual_teu": "must be non-negative"},
    ... )

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class GreenPortException(Exception):
    """Base exception for all GreenPort errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "GP_VALIDATION_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "GP"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize GreenPort exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code based on exception class.

        Returns:
            Error code like "GP_ASSUMPTION_LOAD_ERROR"
        """
        class_name = self.__class__.__name__
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', class_name).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization.

        Returns:
            Dictionary with all error details
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string.

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        """String representation with error code and message."""
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


# ==============================================================================
# Boundary Exceptions
# ==============================================================================

class ValidationError(GreenPortException):
    """Calculation request failed boundary validation.

    The message names the first offending field; ``invalid_fields`` carries
    every problem found.

    Example:
        >>> raise ValidationError(
        ...     message="At least one terminal is required.",
        ...     invalid_fields={"terminals": "at least one terminal is required"},
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        invalid_fields: Optional[Dict[str, str]] = None,
    ):
        """Initialize validation error.

        Args:
            message: Error message
            context: Error context
            invalid_fields: Dictionary of field_path -> reason
        """
        context = context or {}
        if invalid_fields:
            context["invalid_fields"] = invalid_fields
        self.invalid_fields = invalid_fields or {}
        super().__init__(message, context=context)


class AssumptionLoadError(GreenPortException):
    """Assumption set could not be loaded completely.

    Raised instead of handing a partial assumption set to the engine.

    Example:
        >>> raise AssumptionLoadError(
        ...     message="Failed to load assumptions: piece_grid has no rows",
        ...     profile="scenario_7",
        ...     missing=["piece_grid"],
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        profile: Optional[str] = None,
        missing: Optional[list] = None,
    ):
        """Initialize assumption load error.

        Args:
            message: Error message
            context: Error context
            profile: Assumption profile being loaded
            missing: Tables, rows or keys that were missing
        """
        context = context or {}
        if profile:
            context["profile"] = profile
        if missing:
            context["missing"] = missing
        super().__init__(message, context=context)


class ProfileError(GreenPortException):
    """Assumption profile or override operation is invalid.

    Example:
        >>> raise ProfileError(
        ...     message="Profile 'default' cannot be deleted",
        ...     profile="default",
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        profile: Optional[str] = None,
    ):
        """Initialize profile error.

        Args:
            message: Error message
            context: Error context
            profile: Affected profile name
        """
        context = context or {}
        if profile:
            context["profile"] = profile
        super().__init__(message, context=context)


class CalculationError(GreenPortException):
    """Calculation failed; the tagged failure returned by the boundary.

    Example:
        >>> raise CalculationError(
        ...     message="Calculation failed",
        ...     cause=ZeroDivisionError("float division by zero"),
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        """Initialize calculation error.

        Args:
            message: Error message
            context: Error context
            cause: Original exception that caused this error
        """
        context = context or {}
        if cause:
            context["cause"] = str(cause)
            context["cause_type"] = type(cause).__name__
        super().__init__(message, context=context)


class CalculationInProgressError(GreenPortException):
    """Another calculation is still running in this session."""
    pass


# ==============================================================================
# Exception Utilities
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, GreenPortException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


def is_retriable(exc: Exception) -> bool:
    """Check if exception is retriable.

    Args:
        exc: Exception to check

    Returns:
        True if the boundary may retry the operation
    """
    # Retriable: assumption fetch, busy session
    retriable_types = (AssumptionLoadError, CalculationInProgressError)

    # Non-retriable: bad input, bad profile operation
    non_retriable_types = (ValidationError, ProfileError)

    if isinstance(exc, retriable_types):
        return True
    if isinstance(exc, non_retriable_types):
        return False

    return False


__all__ = [
    "GreenPortException",
    "ValidationError",
    "AssumptionLoadError",
    "ProfileError",
    "CalculationError",
    "CalculationInProgressError",
    "format_exception_chain",
    "is_retriable",
]
