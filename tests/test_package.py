# tests/test_package.py
"""
Tests for the package surface: version metadata and the logger helpers.
"""

import logging

import tsreg
from tsreg.version import get_version_history, get_version_info


def test_version_matches_components():
    major, minor, patch = get_version_info()
    assert tsreg.get_version() == f"{major}.{minor}.{patch}"
    assert tsreg.__version__ == tsreg.get_version()


def test_version_history_is_newest_first():
    history = get_version_history()
    assert history[0]["version"] == tsreg.__version__
    # returns a copy
    history.clear()
    assert get_version_history()


def test_set_log_level_accepts_names_and_numbers():
    package_logger = logging.getLogger("tsreg")
    previous = package_logger.level
    try:
        tsreg.set_log_level("debug")
        assert package_logger.level == logging.DEBUG
        tsreg.set_log_level(logging.ERROR)
        assert package_logger.level == logging.ERROR
    finally:
        package_logger.setLevel(previous)


def test_public_names_are_exported():
    for name in tsreg.__all__:
        assert hasattr(tsreg, name), name
