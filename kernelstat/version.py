# kernelstat/version.py
"""
KernelStat Version Information

This module is the single source of the version string exposed as
``kernelstat.__version__`` and of the package metadata used by the
documentation build.

KernelStat follows semantic versioning (MAJOR.MINOR.PATCH):
- MAJOR: Incompatible API changes
- MINOR: Backwards-compatible functionality additions
- PATCH: Backwards-compatible bug fixes
"""

# Version components
VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

# Full version string
__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

# Package metadata
__title__ = "KernelStat"
__description__ = "Kernel functions and data-driven bandwidth selection for time series"
__license__ = "MIT"
