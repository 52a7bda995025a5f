"""Content linting."""

from .report import LintIssue, LintReport
from .rules import default_rules, lint_collection

__all__ = [
    "LintIssue",
    "LintReport",
    "default_rules",
    "lint_collection",
]
