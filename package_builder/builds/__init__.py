"""Build orchestration module.

This module handles:
- The packaging engine interface and its command-line implementation
- Output file naming and checksums
- Driving one engine call per target
"""

from package_builder.builds.service import BuildReport, build_all, make_packages

__all__ = ["BuildReport", "build_all", "make_packages"]
