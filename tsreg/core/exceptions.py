'''
Custom exception classes for tsreg.

Every fallible numerical routine in the package either returns its result or
raises a subclass of TsregError. Each error carries a machine-readable code so
that callers can log failures in a structured way without parsing messages:

- EMPTY_VALUE: the caller supplied an empty matrix, vector or segment set.
- INVALID_VALUE: mis-shaped input, an out-of-range parameter, an unknown enum
  tag, or a numerical failure the solver cannot recover from.

Recoverable numerical trouble (a singular normal-equation matrix, a solver
stopping at its iteration limit) is reported through warnings instead.
'''

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import inspect
import warnings
from pathlib import Path

import numpy as np


class ErrorCode(str, Enum):
    """Machine-readable error codes carried by every TsregError."""

    EMPTY_VALUE = "EMPTY_VALUE"
    INVALID_VALUE = "INVALID_VALUE"


def _format_message(message: str,
                    details: Optional[str],
                    context: Dict[str, Any]) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"
    return full_message


class TsregError(Exception):
    """Base exception class for all tsreg errors.

    Attributes:
        code: The ErrorCode classifying the failure
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    code: ErrorCode = ErrorCode.INVALID_VALUE

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the TsregError.

        Args:
            message: The primary error message
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.message = message
        self.details = details
        self.context = dict(context or {})

        full_message = _format_message(message, details, self.context)

        # Add caller information for better debugging
        frame = inspect.currentframe()
        if frame:
            try:
                frame = frame.f_back
                # Skip the constructors of subclasses and the raise_* helpers
                while frame is not None and (
                    frame.f_code.co_name == "__init__"
                    or frame.f_code.co_name.startswith("raise_")
                ):
                    frame = frame.f_back
                if frame:
                    caller_info = inspect.getframeinfo(frame)
                    full_message += (
                        f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"
                    )
            finally:
                del frame

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured form of the error, suitable for logging."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "context": dict(self.context),
        }


class EmptyValueError(TsregError):
    """Raised when a matrix, vector or segment collection is empty.

    Attributes:
        array_name: Name of the empty input
    """

    code = ErrorCode.EMPTY_VALUE

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name

        context_dict = dict(context or {})
        if array_name:
            context_dict["Array"] = array_name

        super().__init__(message, details, context_dict)


class InvalidValueError(TsregError):
    """Raised for out-of-range parameters and unrecoverable numerical failures.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    code = ErrorCode.INVALID_VALUE

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the InvalidValueError.

        Args:
            message: The primary error message
            param_name: The name of the parameter that caused the error
            param_value: The invalid parameter value
            constraint: Description of the constraint that was violated
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = dict(context or {})
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class DimensionError(InvalidValueError):
    """Exception raised when array shapes are incompatible.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = dict(context or {})
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details=details, context=context_dict)


class NumericError(InvalidValueError):
    """Exception raised for numerical failures a solver cannot recover from.

    Attributes:
        operation: The operation that failed
        issue: Description of the numerical issue
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue

        context_dict = dict(context or {})
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details=details, context=context_dict)


class TsregWarning(UserWarning):
    """Base warning class for all tsreg warnings.

    Attributes:
        message: The warning message
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = dict(context or {})
        super().__init__(_format_message(message, details, self.context))


class ConvergenceWarning(TsregWarning):
    """Warning issued when an iterative solver stops at its iteration limit.

    Attributes:
        iterations: The number of iterations performed
        tolerance: The convergence tolerance that was used
        max_change: Largest coordinate change in the final iteration
    """

    def __init__(self,
                 message: str,
                 iterations: Optional[int] = None,
                 tolerance: Optional[float] = None,
                 max_change: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.iterations = iterations
        self.tolerance = tolerance
        self.max_change = max_change

        context_dict = dict(context or {})
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if tolerance is not None:
            context_dict["Tolerance"] = tolerance
        if max_change is not None:
            context_dict["Max Change"] = max_change

        super().__init__(message, details, context_dict)


class NumericWarning(TsregWarning):
    """Warning for numerical issues that do not prevent computation.

    Attributes:
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue
        self.value = value

        context_dict = dict(context or {})
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue
        if value is not None:
            if isinstance(value, np.ndarray) and value.size > 10:
                # Truncate large arrays for readability
                context_dict["Value"] = f"Array with shape {value.shape}"
            else:
                context_dict["Value"] = value

        super().__init__(message, details, context_dict)


def raise_empty_error(message: str,
                      array_name: Optional[str] = None,
                      details: Optional[str] = None,
                      context: Optional[Dict[str, Any]] = None) -> None:
    """Raise an EmptyValueError with consistent formatting.

    Raises:
        EmptyValueError: Always
    """
    raise EmptyValueError(message, array_name, details, context)


def raise_invalid_error(message: str,
                        param_name: Optional[str] = None,
                        param_value: Optional[Any] = None,
                        constraint: Optional[str] = None,
                        details: Optional[str] = None,
                        context: Optional[Dict[str, Any]] = None) -> None:
    """Raise an InvalidValueError with consistent formatting.

    Raises:
        InvalidValueError: Always
    """
    raise InvalidValueError(message, param_name, param_value, constraint, details, context)


def raise_dimension_error(message: str,
                          array_name: Optional[str] = None,
                          expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                          actual_shape: Optional[Tuple[int, ...]] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionError with consistent formatting.

    Raises:
        DimensionError: Always
    """
    raise DimensionError(message, array_name, expected_shape, actual_shape, details, context)


def raise_numeric_error(message: str,
                        operation: Optional[str] = None,
                        issue: Optional[str] = None,
                        details: Optional[str] = None,
                        context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a NumericError with consistent formatting.

    Raises:
        NumericError: Always
    """
    raise NumericError(message, operation, issue, details, context)


# Helper functions for issuing warnings with consistent formatting

def warn_convergence(message: str,
                     iterations: Optional[int] = None,
                     tolerance: Optional[float] = None,
                     max_change: Optional[float] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a ConvergenceWarning with consistent formatting."""
    warnings.warn(
        ConvergenceWarning(message, iterations, tolerance, max_change, details, context),
        stacklevel=3
    )


def warn_numeric(message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a NumericWarning with consistent formatting."""
    warnings.warn(
        NumericWarning(message, operation, issue, value, details, context),
        stacklevel=3
    )
