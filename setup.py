#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Legacy entry point for tsreg; all packaging metadata lives in pyproject.toml.
"""

import setuptools

if __name__ == "__main__":
    setuptools.setup()
