# tsreg/core/validation.py

"""
Input validation utilities for tsreg.

Public functions accept NumPy arrays, pandas objects and plain sequences. The
helpers here convert those to contiguous float64 arrays and raise the package's
EMPTY_VALUE / INVALID_VALUE errors when the input cannot be used.
"""

from typing import Any, List, Optional

import numpy as np
import pandas as pd

from tsreg.core.exceptions import (
    raise_dimension_error, raise_empty_error, raise_invalid_error
)
from tsreg.core.types import Matrix, MatrixLike, SegmentsLike, Vector, VectorLike


def _to_array(data: Any) -> np.ndarray:
    if isinstance(data, (pd.Series, pd.DataFrame)):
        data = data.to_numpy()
    try:
        return np.ascontiguousarray(data, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise_invalid_error(
            f"Input could not be converted to a float array: {e}",
            param_value=type(data).__name__
        )


def validate_vector(
    vector: VectorLike,
    vector_name: str = "vector",
    expected_length: Optional[int] = None
) -> Vector:
    """Convert input to a 1-D float64 array and check it.

    Column and row vectors (2-D with one singleton dimension) are flattened.

    Args:
        vector: Data to validate
        vector_name: Name of the vector for error messages
        expected_length: Expected length, or None for any

    Returns:
        np.ndarray: The validated vector

    Raises:
        EmptyValueError: If the vector has no elements
        DimensionError: If the input is not vector-shaped or has the wrong length
    """
    if vector is None:
        raise_empty_error(f"{vector_name} cannot be None", array_name=vector_name)

    arr = _to_array(vector)

    if arr.ndim == 2 and (arr.shape[0] == 1 or arr.shape[1] == 1):
        arr = arr.ravel()
    elif arr.ndim != 1:
        raise_dimension_error(
            f"{vector_name} must be 1-dimensional, got shape {arr.shape}",
            array_name=vector_name,
            expected_shape="1D vector",
            actual_shape=arr.shape
        )

    if arr.size == 0:
        raise_empty_error(f"{vector_name} is empty", array_name=vector_name)

    if expected_length is not None and len(arr) != expected_length:
        raise_dimension_error(
            f"{vector_name} has length {len(arr)}, expected {expected_length}",
            array_name=vector_name,
            expected_shape=f"vector of length {expected_length}",
            actual_shape=arr.shape
        )

    return arr


def validate_matrix(
    matrix: MatrixLike,
    matrix_name: str = "X",
    expected_rows: Optional[int] = None
) -> Matrix:
    """Convert input to a 2-D float64 design matrix and check it.

    A 1-D input is treated as a single regressor and reshaped to a column.

    Args:
        matrix: Data to validate
        matrix_name: Name of the matrix for error messages
        expected_rows: Required number of rows, or None for any

    Returns:
        np.ndarray: The validated matrix, shape (n, k)

    Raises:
        EmptyValueError: If the matrix has no rows or no columns
        DimensionError: If the input has more than two dimensions or the
            wrong number of rows
    """
    if matrix is None:
        raise_empty_error(f"{matrix_name} cannot be None", array_name=matrix_name)

    arr = _to_array(matrix)

    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    elif arr.ndim != 2:
        raise_dimension_error(
            f"{matrix_name} must be 2-dimensional, got {arr.ndim} dimensions",
            array_name=matrix_name,
            expected_shape="2D matrix",
            actual_shape=arr.shape
        )

    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise_empty_error(f"{matrix_name} is empty", array_name=matrix_name)

    if expected_rows is not None and arr.shape[0] != expected_rows:
        raise_dimension_error(
            f"{matrix_name} has {arr.shape[0]} rows, expected {expected_rows}",
            array_name=matrix_name,
            expected_shape=f"({expected_rows}, any)",
            actual_shape=arr.shape
        )

    return arr


def validate_segments(segments: SegmentsLike, name: str = "segments") -> List[Vector]:
    """Convert a collection of series to a list of 1-D float64 arrays.

    Empty segments are kept; it is an error only when every segment is empty.

    Raises:
        EmptyValueError: If there are no segments or all of them are empty
        DimensionError: If a segment is not one-dimensional
    """
    if segments is None or len(segments) == 0:
        raise_empty_error(f"{name} contains no segments", array_name=name)

    out = []
    for i, seg in enumerate(segments):
        arr = _to_array(seg)
        if arr.ndim == 2 and (arr.shape[0] == 1 or arr.shape[1] == 1):
            arr = arr.ravel()
        if arr.ndim != 1:
            raise_dimension_error(
                f"segment {i} must be 1-dimensional, got shape {arr.shape}",
                array_name=f"{name}[{i}]",
                expected_shape="1D vector",
                actual_shape=arr.shape
            )
        out.append(arr)

    if all(seg.size == 0 for seg in out):
        raise_empty_error(f"all {len(out)} {name} are empty", array_name=name)

    return out


def validate_positive_int(value: Any, param_name: str, allow_zero: bool = False) -> int:
    """Check that ``value`` is an integer above zero (or at least zero).

    Raises:
        InvalidValueError: If the value is not an integer or is out of range
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise_invalid_error(
            f"{param_name} must be an integer, got {type(value).__name__}",
            param_name=param_name,
            param_value=value
        )
    lower = 0 if allow_zero else 1
    if value < lower:
        raise_invalid_error(
            f"{param_name} must be {'non-negative' if allow_zero else 'positive'}, got {value}",
            param_name=param_name,
            param_value=value,
            constraint=f">= {lower}"
        )
    return int(value)
