"""CLI package for the tech-debt scanner.

Modules:
    main: click command group (`techdebt scan`, `techdebt report`)
    output: OutputManager for status lines with color/quiet support
"""

from .output import OutputConfig, OutputManager, should_use_color

__all__ = [
    "OutputConfig",
    "OutputManager",
    "should_use_color",
]
