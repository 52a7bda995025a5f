"""The Post model and single-file loading."""

from __future__ import annotations

import datetime as dt
import re
from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import BaseModel

from .blocks import BodyScan, scan_body
from .frontmatter import FrontMatter, parse_front_matter, split_front_matter


class Post(BaseModel):
    """A single article: front matter plus a Markdown/MDX body."""

    path: str  # POSIX path relative to the content root
    source_path: Path
    slug: str
    format: Literal["md", "mdx"]
    front_matter: FrontMatter
    body: str
    body_line: int = 1

    @property
    def title(self) -> str:
        if self.front_matter.title:
            return self.front_matter.title
        return self.slug.rsplit("/", 1)[-1].replace("-", " ")

    @property
    def date(self) -> dt.date | None:
        return self.front_matter.date

    @property
    def draft(self) -> bool:
        return self.front_matter.draft

    @property
    def description(self) -> str | None:
        return self.front_matter.description

    @property
    def tags(self) -> list[str]:
        return self.front_matter.tags

    @property
    def series(self) -> str | None:
        return self.front_matter.series

    @property
    def url(self) -> str:
        return f"/{self.slug}/"

    @property
    def directory(self) -> PurePosixPath:
        """Directory of the source file, relative to the content root."""
        return PurePosixPath(self.path).parent

    def is_published(self, today: dt.date | None = None) -> bool:
        """Visible on the site: not a draft, dated, and not scheduled."""
        today = today or dt.date.today()
        if self.draft or self.date is None:
            return False
        return self.date <= today

    def scan(self) -> BodyScan:
        return scan_body(self.body, self.body_line)


def slugify(text: str, max_len: int = 80) -> str:
    """Convert text to a lowercase, hyphen-separated URL slug.

    Args:
        text: Text to convert
        max_len: Maximum length of slug

    Returns:
        Slug made of [a-z0-9-], possibly empty
    """
    text = text.lower().replace("&", " and ")
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")

    if len(text) > max_len:
        # Break at a hyphen boundary when possible
        cut = text[:max_len]
        text = cut.rsplit("-", 1)[0] if "-" in cut else cut

    return text


def slug_for_path(path: str) -> str:
    """Derive a post slug from its path relative to the content root.

    `guides/Dynamic Layouts.md` -> `guides/dynamic-layouts`;
    `guides/storybook/index.mdx` -> `guides/storybook`.
    """
    rel = PurePosixPath(path)
    parts = list(rel.parent.parts)
    if rel.stem.lower() != "index" or not parts:
        parts.append(rel.stem)
    return "/".join(slugify(p) or p.lower() for p in parts)


def load_post(path: Path, content_root: Path) -> Post:
    """Load one post file.

    Raises:
        FrontMatterError: If the front-matter block is malformed
        OSError, UnicodeDecodeError: If the file cannot be read as UTF-8
    """
    rel = path.relative_to(content_root).as_posix()
    text = path.read_text(encoding="utf-8")
    data, body, body_line = split_front_matter(text, rel)
    front_matter = parse_front_matter(data, rel)

    return Post(
        path=rel,
        source_path=path.resolve(),
        slug=slug_for_path(rel),
        format="mdx" if path.suffix.lower() == ".mdx" else "md",
        front_matter=front_matter,
        body=body,
        body_line=body_line,
    )
