# tsreg/version.py
"""
tsreg Version Information

This module contains version information and package metadata for tsreg.
It centralizes version tracking, making it accessible programmatically via
tsreg.__version__.

tsreg follows semantic versioning (MAJOR.MINOR.PATCH):
- MAJOR: Incompatible API changes
- MINOR: Backwards-compatible functionality additions
- PATCH: Backwards-compatible bug fixes
"""

from typing import Dict, Tuple, Any, List

# Version components
VERSION_MAJOR = 0
VERSION_MINOR = 3
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "tsreg"
__description__ = "Classical time-series and regression statistics for research pipelines"
__license__ = "MIT"

# Python version requirements
__python_requires__ = ">=3.10"

# Package dependencies
__dependencies__ = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
}

# Version history with release dates and major changes
VERSION_HISTORY = [
    {
        "version": "0.3.0",
        "release_date": "2026-09-28",
        "changes": [
            "Parallel multi-segment autocorrelation over a bounded lag queue",
            "Logistic LASSO takes the intercept flag explicitly",
            "Ljung-Box accumulates autocorrelations from lag 1",
        ]
    },
    {
        "version": "0.2.0",
        "release_date": "2026-06-02",
        "changes": [
            "FFT autocorrelation for segment collections",
            "ADF lag selection by AIC, BIC or t-statistic, left and right tails",
        ]
    },
    {
        "version": "0.1.0",
        "release_date": "2026-03-11",
        "changes": [
            "OLS with pseudo-inverse fallback",
            "Linear LASSO by coordinate descent",
        ]
    },
]


def get_version_info() -> Tuple[int, int, int]:
    """
    Return the version components as a tuple.

    Returns:
        Tuple[int, int, int]: (major, minor, patch)
    """
    return (VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH)


def get_version_history() -> List[Dict[str, Any]]:
    """
    Return the release history, newest first.

    Returns:
        List[Dict[str, Any]]: One entry per release
    """
    return list(VERSION_HISTORY)
