"""Lint issue and report models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["error", "warning"]


class LintIssue(BaseModel):
    """One problem found in one post file."""

    model_config = {"frozen": True}

    path: str
    line: int = 1
    rule: str
    severity: Severity
    message: str

    def format(self) -> str:
        return f"{self.path}:{self.line}: {self.severity} [{self.rule}] {self.message}"


class LintReport(BaseModel):
    """All issues found in a content tree."""

    posts_checked: int = 0
    issues: list[LintIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def ok(self, strict: bool = False) -> bool:
        """True when there are no errors (and, if strict, no warnings)."""
        if strict:
            return not self.issues
        return not self.errors

    def for_path(self, path: str) -> list[LintIssue]:
        return [i for i in self.issues if i.path == path]

    def rules(self) -> set[str]:
        return {i.rule for i in self.issues}
