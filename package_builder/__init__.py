"""Launcher Package Builder - orchestration for launcher installer packages.

This package resolves build targets, prepares the download cache and output
directories, and drives the packaging engine once per target.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
