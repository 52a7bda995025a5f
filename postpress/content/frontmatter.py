"""Front-matter parsing and validation."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..config import FRONT_MATTER_KEYS

OPEN_DELIMITER = "---"
CLOSE_DELIMITERS = ("---", "...")


class FrontMatterError(ValueError):
    """Raised when a post's front-matter block cannot be parsed."""

    def __init__(self, message: str, path: Path | str | None = None, line: int = 1):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.line = line

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class FrontMatter(BaseModel):
    """Recognized front-matter fields of a post."""

    model_config = {"frozen": True}

    title: str | None = None
    description: str | None = None
    date: dt.date | None = None
    draft: bool = False
    tags: list[str] = Field(default_factory=list)
    series: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title", "description", "series", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (int, float, dt.date)) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return dt.datetime.fromisoformat(text).date()
            except ValueError:
                raise ValueError(f"not an ISO date: {text!r}") from None
        return value

    @field_validator("draft", mode="before")
    @classmethod
    def _coerce_draft(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            items: list[Any] = value.split(",")
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            raise ValueError("expected a list of strings")

        tags: list[str] = []
        for item in items:
            if isinstance(item, (dict, list, tuple)):
                raise ValueError("expected a list of strings")
            if item is None:
                continue
            tag = str(item).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @property
    def extra_keys(self) -> list[str]:
        return sorted(self.extra)


def split_front_matter(text: str, path: Path | str | None = None) -> tuple[dict[str, Any], str, int]:
    """Split a post's text into front-matter data and body.

    Args:
        text: Full file contents
        path: Source path, used in error messages

    Returns:
        (data, body, body_line) where body_line is the 1-based file line
        on which the body starts

    Raises:
        FrontMatterError: If the block is unterminated or is not a YAML mapping
    """
    text = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")

    if not lines or lines[0].rstrip() != OPEN_DELIMITER:
        return {}, text, 1

    close = None
    for i in range(1, len(lines)):
        if lines[i].rstrip() in CLOSE_DELIMITERS:
            close = i
            break
    if close is None:
        raise FrontMatterError("front matter block is never closed", path)

    raw = "\n".join(lines[1:close])
    try:
        data = yaml.safe_load(raw) if raw.strip() else {}
    except (yaml.YAMLError, ValueError) as e:
        # Impossible timestamps (2024-02-30) surface as a plain ValueError.
        line = 1
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = mark.line + 2
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"invalid YAML in front matter: {problem}", path, line) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError("front matter must be a mapping of keys to values", path)

    body = "\n".join(lines[close + 1 :])
    return {str(k): v for k, v in data.items()}, body, close + 2


def parse_front_matter(data: dict[str, Any], path: Path | str | None = None) -> FrontMatter:
    """Validate raw front-matter data.

    `published` is accepted as an alias for `date`; when both are present
    `date` wins. Keys outside the recognized set are kept in `extra`.
    """
    fields = {k: v for k, v in data.items() if k in FRONT_MATTER_KEYS}
    published = fields.pop("published", None)
    if _is_blank(fields.get("date")) and not _is_blank(published):
        fields["date"] = published
    fields["extra"] = {k: v for k, v in data.items() if k not in FRONT_MATTER_KEYS}

    try:
        return FrontMatter.model_validate(fields)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "front matter"
        msg = str(err.get("msg", "invalid value"))
        raise FrontMatterError(f"invalid value for '{field}': {msg}", path) from e


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def render_front_matter(data: dict[str, Any]) -> str:
    """Render a front-matter block (with delimiters) for a new post."""
    dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=None)
    return f"{OPEN_DELIMITER}\n{dumped}{OPEN_DELIMITER}\n"
