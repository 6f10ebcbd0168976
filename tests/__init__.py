"""
tsreg Test Suite

Tests for the regression estimators, the autocorrelation engine, the unit
root and residual diagnostics, and the shared core utilities.
"""
