'''
Standardized result containers for tsreg.

Fit and test functions return immutable dataclass records. The shared
behaviour (dictionary and JSON export, read-only arrays, printing) lives in
ModelResult; each record type adds its own summary table. Records specific to
one model family are defined next to that model, the regression record that
OLS, LASSO, the ADF driver and the power-law fit all share lives here.
'''

import json
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd


def _jsonable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (np.floating, np.integer, np.bool_)):
        return value.item()
    if is_dataclass(value) and isinstance(value, ModelResult):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class ModelResult:
    """Behaviour shared by all result records.

    Subclasses are frozen dataclasses. Array fields are converted to float64
    and flagged read-only so a returned record cannot be altered in place.
    """

    def _freeze_arrays(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, (list, tuple, np.ndarray)) and f.metadata.get("array"):
                arr = np.array(value, dtype=np.float64)
                arr.setflags(write=False)
                object.__setattr__(self, f.name, arr)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result object to a JSON-compatible dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of the result object
        """
        return {f.name: _jsonable(getattr(self, f.name)) for f in fields(self)}

    def to_json(self, path: Optional[Union[str, Path]] = None, **kwargs: Any) -> Optional[str]:
        """Convert the result object to JSON.

        Args:
            path: Path to save the JSON file (if None, returns the JSON string)
            **kwargs: Additional keyword arguments for json.dump/dumps

        Returns:
            Optional[str]: JSON string if path is None, None otherwise
        """
        result_dict = self.to_dict()
        if path is None:
            return json.dumps(result_dict, **kwargs)

        with open(path, 'w') as f:
            json.dump(result_dict, f, **kwargs)
        return None

    def summary(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.summary()


def array_field(**kwargs: Any) -> Any:
    """dataclass field holding a read-only float64 array."""
    return field(metadata={"array": True}, **kwargs)


def _format_cell(value: float, width: int = 12) -> str:
    if value is None or not np.isfinite(value):
        return f"{'N/A':<{width}}"
    return f"{value:<{width}.6f}"


@dataclass(frozen=True, eq=False)
class RegressionResult(ModelResult):
    """
    Result of an OLS or LASSO fit.

    For LASSO fits the classical standard errors, t-statistics and p-values do
    not exist and are reported as zeros. For logistic LASSO ``r_squared`` is
    McFadden's pseudo R-squared and ``sigma2`` / ``adj_r_squared`` are zero.

    Attributes:
        coefficients: Estimated coefficients, one per design column
        std_errors: Standard errors of the coefficients
        t_stats: t-statistics
        p_values: Two-sided p-values from Student's t with n - k degrees of freedom
        residuals: y minus the fitted values
        sigma2: Residual variance RSS / (n - k)
        r_squared: Coefficient of determination
        adj_r_squared: Adjusted R-squared
        aic: Akaike information criterion
        bic: Bayesian information criterion
        nobs: Number of observations
        nparams: Number of coefficients
        log_likelihood: Log-likelihood the information criteria are based on
        used_pseudo_inverse: Whether X'X had to be inverted through the SVD
        model_name: Name of the estimator
    """

    coefficients: np.ndarray = array_field()
    std_errors: np.ndarray = array_field()
    t_stats: np.ndarray = array_field()
    p_values: np.ndarray = array_field()
    residuals: np.ndarray = array_field()
    sigma2: float = 0.0
    r_squared: float = 0.0
    adj_r_squared: float = 0.0
    aic: float = 0.0
    bic: float = 0.0
    nobs: int = 0
    nparams: int = 0
    log_likelihood: float = 0.0
    used_pseudo_inverse: bool = False
    model_name: str = "OLS"

    def __post_init__(self) -> None:
        self._freeze_arrays()

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Linear predictor ``X @ coefficients`` for a design with matching columns."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        return X @ self.coefficients

    def summary(self, variable_names: Optional[List[str]] = None) -> str:
        """
        Generate a text summary of the regression results.

        Args:
            variable_names: Optional names for the coefficients

        Returns:
            str: A formatted string containing the regression results summary
        """
        names = variable_names or [f"x{i}" for i in range(len(self.coefficients))]

        header = f"Model: {self.model_name}\n"
        header += "=" * (len(header) - 1) + "\n\n"

        info = f"Observations: {self.nobs}    Parameters: {self.nparams}\n"
        info += f"R-squared: {self.r_squared:.6f}    Adj. R-squared: {self.adj_r_squared:.6f}\n"
        info += f"Sigma^2: {self.sigma2:.6g}    Log-likelihood: {self.log_likelihood:.6f}\n"
        info += f"AIC: {self.aic:.6f}    BIC: {self.bic:.6f}\n"
        if self.used_pseudo_inverse:
            info += "Note: X'X was singular, the pseudo-inverse was used\n"
        info += "\n"

        table = "-" * 80 + "\n"
        table += f"{'Variable':<15} {'Coefficient':<12} {'Std. Error':<12} "
        table += f"{'t-Stat':<12} {'p-Value':<12}\n"
        table += "-" * 80 + "\n"
        for i, name in enumerate(names):
            table += f"{name:<15} {self.coefficients[i]:<12.6f} "
            table += _format_cell(self.std_errors[i]) + " "
            table += _format_cell(self.t_stats[i]) + " "
            table += _format_cell(self.p_values[i])
            p_value = self.p_values[i]
            if np.isfinite(p_value) and self.std_errors[i] > 0:
                if p_value < 0.01:
                    table += " ***"
                elif p_value < 0.05:
                    table += " **"
                elif p_value < 0.1:
                    table += " *"
            table += "\n"
        table += "-" * 80 + "\n"
        table += "Significance codes: *** 0.01, ** 0.05, * 0.1\n"

        return header + info + table

    def to_dataframe(self, variable_names: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Convert the coefficient table to a pandas DataFrame.

        Returns:
            pd.DataFrame: One row per coefficient
        """
        names = variable_names or [f"x{i}" for i in range(len(self.coefficients))]
        return pd.DataFrame({
            "Coefficient": self.coefficients,
            "Std. Error": self.std_errors,
            "t-Stat": self.t_stats,
            "p-Value": self.p_values,
        }, index=pd.Index(names, name="Variable"))
