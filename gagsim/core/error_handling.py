"""
Centralized error handling, exception types and input-coercion helpers.
"""

import logging
import math
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class InvalidLevelError(ValueError):
    """Raised when cog health is requested for a level below 1."""

    def __init__(self, level: Any):
        super().__init__(f"Cog health cannot be calculated for level {level} (must be >= 1)")
        self.level = level


class UnknownTrackError(KeyError):
    """Raised when a gag references a track missing from the track metadata."""

    def __init__(self, track: Any):
        super().__init__(f"Gag track {track} not found")
        self.track = track


class ErrorSeverity(Enum):
    """Enumeration of error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class SolverError:
    """Represents an error with severity, context, and optional exception information."""

    message: str
    severity: ErrorSeverity
    context: dict[str, Any]
    exception: Optional[Exception] = None


class ErrorHandler:
    """Centralized error handling for the solver."""

    def __init__(self) -> None:
        """Initialize the ErrorHandler with a logger and empty error history."""
        self.logger = logging.getLogger("gagsim.errors")
        self.error_history: list[SolverError] = []

    def handle(
        self,
        message: str,
        severity: ErrorSeverity,
        context: Optional[dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> None:
        """Handle an error based on its severity."""
        error = SolverError(
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        self.error_history.append(error)

        # Prefix context keys to avoid conflicts with logging system reserved keys
        safe_context = {f"ctx_{key}": value for key, value in error.context.items()}

        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(f"CRITICAL: {error.message}", extra=safe_context)
            if error.exception:
                self.logger.critical(traceback.format_exc())
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(f"ERROR: {error.message}", extra=safe_context)
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(f"WARNING: {error.message}", extra=safe_context)
        else:
            self.logger.info(f"INFO: {error.message}", extra=safe_context)

    def safe_execute(
        self,
        operation: Callable[[], T],
        default: T,
        error_message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[dict] = None,
    ) -> T:
        """Safely execute an operation, returning ``default`` when it raises."""
        try:
            return operation()
        except Exception as e:
            self.handle(
                f"{error_message}: {str(e)}",
                severity,
                context,
                e,
            )
            return default

    def clear_history(self) -> None:
        """Forget every recorded error."""
        self.error_history.clear()


# Global error handler instance
ERROR_HANDLER = ErrorHandler()


def log_warning(
    message: str,
    context: Optional[dict[str, Any]] = None,
    exception: Optional[Exception] = None,
) -> None:
    """Log a warning-level message."""
    ERROR_HANDLER.handle(message, ErrorSeverity.MEDIUM, context, exception)


# ==============================================================================
# COERCION HELPERS
# ==============================================================================
# Request fields are never rejected: invalid values are logged and replaced
# with a sensible default.


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def ensure_non_negative_float(
    value: Any,
    param_name: str,
    default: float,
    context: Optional[dict[str, Any]] = None,
) -> float:
    """
    Ensures a value is a finite, non-negative number.

    Non-numeric and non-finite values fall back to ``default`` with a warning,
    negative values are clamped to zero.

    Args:
        value: The value to coerce
        param_name: Human-readable parameter name for error messages
        default: Value used when ``value`` is not a finite number
        context: Additional context for logging

    Returns:
        float: The coerced value
    """
    number = _as_number(value)
    if number is None:
        log_warning(
            f"{param_name} must be a finite number, got: {value!r}, correcting to {default}",
            {**(context or {}), "param_name": param_name, "value": value},
        )
        return default
    return max(0.0, number)


def ensure_int_in_range(
    value: Any,
    param_name: str,
    min_val: int,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
    context: Optional[dict[str, Any]] = None,
) -> int:
    """
    Ensures a value is an integer within the specified range.

    The value is floored, then clamped to ``[min_val, max_val]``. Values that
    are not finite numbers are replaced with ``default`` (or ``min_val``).

    Args:
        value: The value to coerce
        param_name: Human-readable parameter name for error messages
        min_val: Lower bound (inclusive)
        max_val: Upper bound (inclusive), or None for no bound
        default: Value used when ``value`` is not a finite number
        context: Additional context for logging

    Returns:
        int: The coerced value
    """
    fallback = min_val if default is None else default
    number = _as_number(value)
    if number is None:
        log_warning(
            f"{param_name} must be a finite number, got: {value!r}, correcting to {fallback}",
            {**(context or {}), "param_name": param_name, "value": value},
        )
        return fallback
    result = max(min_val, math.floor(number))
    if max_val is not None:
        result = min(max_val, result)
    return result


def ensure_optional_hp(value: Any, floor: int) -> int | None:
    """
    Coerces an optional hit-point override.

    Returns None when no usable override was given, otherwise the floored
    value clamped to at least ``floor``.
    """
    if value is None:
        return None
    number = _as_number(value)
    if number is None:
        return None
    return max(floor, math.floor(number))
