"""Tech-debt scanner: line-heuristic detection of maintainability issues."""

__version__ = "1.0.0"
