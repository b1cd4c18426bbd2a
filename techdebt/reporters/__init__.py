"""Report renderers: terminal text, JSON summary and markdown."""

from .json_report import JSONReporter
from .markdown import MarkdownReportConfig, MarkdownReporter, health_label, health_score
from .text import TextReporter

__all__ = [
    "JSONReporter",
    "MarkdownReportConfig",
    "MarkdownReporter",
    "TextReporter",
    "health_label",
    "health_score",
]
