"""
tsreg Bootstrap Module

Residual resampling used to simulate white-noise innovations.
"""

import logging

# Set up module-level logger
logger = logging.getLogger("tsreg.models.bootstrap")

from .residual import BootstrapMethod, simulate_white_noise

__all__ = [
    'BootstrapMethod',
    'simulate_white_noise',
]
