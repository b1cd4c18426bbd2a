"""Configuration package for the scanner."""

from .loader import CONFIG_FILENAME, load_scan_config
from .models import (
    DEFAULT_EXCLUDES,
    DEFAULT_EXTENSIONS,
    AutoFixConfig,
    FileSizeLimits,
    FunctionSizeLimits,
    ScanConfig,
)

__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_EXCLUDES",
    "DEFAULT_EXTENSIONS",
    "AutoFixConfig",
    "FileSizeLimits",
    "FunctionSizeLimits",
    "ScanConfig",
    "load_scan_config",
]
