"""Manifest model and generation."""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel

from .. import __version__
from ..config import SCHEMA_VERSION
from ..content.post import Post
from ..content.tokens import count_words, reading_minutes


class SiteInfo(BaseModel):
    title: str
    base_url: str | None = None


class PostEntry(BaseModel):
    """Post metadata in manifest."""

    path: str
    slug: str
    url: str
    title: str
    date: str
    draft: bool
    description: str | None
    tags: list[str]
    series: str | None
    words: int
    reading_minutes: int
    tokens_approx: int | None = None
    sha256: str


class Manifest(BaseModel):
    """Build manifest with all published-post metadata."""

    schema_version: int = SCHEMA_VERSION
    generator_version: str = __version__
    generated_at: datetime
    site: SiteInfo
    posts: list[PostEntry]
    tags: dict[str, list[str]]  # tag -> slugs
    series: dict[str, list[str]]  # series -> slugs, reading order
    artifacts: dict[str, str]  # path -> sha256
    warnings: list[str]


def compute_sha256(content: bytes | str) -> str:
    """Compute SHA256 hash of content.

    Args:
        content: Bytes or string to hash

    Returns:
        Hex-encoded SHA256 hash
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def create_manifest(
    site: SiteInfo,
    posts: list[Post],
    tags: dict[str, list[Post]],
    series: dict[str, list[Post]],
    artifacts: dict[str, str],
    warnings: list[str],
    tokens: dict[str, int] | None = None,
) -> Manifest:
    """Create a manifest for a site build.

    Args:
        site: Site title and base URL
        posts: Published posts, newest first
        tags: Tag -> posts grouping
        series: Series -> posts grouping
        artifacts: Map of artifact paths to SHA256 hashes
        warnings: List of warning messages
        tokens: Optional post path -> token count

    Returns:
        Populated Manifest object
    """
    tokens = tokens or {}
    entries = [
        PostEntry(
            path=p.path,
            slug=p.slug,
            url=p.url,
            title=p.title,
            date=p.date.isoformat() if p.date else "",
            draft=p.draft,
            description=p.description,
            tags=list(p.tags),
            series=p.series,
            words=count_words(p.body),
            reading_minutes=reading_minutes(p.body),
            tokens_approx=tokens.get(p.path),
            sha256=compute_sha256(p.source_path.read_bytes()),
        )
        for p in posts
    ]

    # Determinism: use a stable timestamp derived from the newest post date.
    dates = [p.date for p in posts if p.date is not None]
    newest = max(dates) if dates else None
    stable_at = (
        datetime(newest.year, newest.month, newest.day, tzinfo=UTC)
        if newest
        else datetime(1970, 1, 1, tzinfo=UTC)
    )

    return Manifest(
        generated_at=stable_at,
        site=site,
        posts=entries,
        tags={tag: [p.slug for p in items] for tag, items in tags.items()},
        series={name: [p.slug for p in items] for name, items in series.items()},
        artifacts=artifacts,
        warnings=warnings,
    )


def write_manifest(manifest: Manifest, output_dir: Path) -> Path:
    """Write manifest to JSON file.

    Args:
        manifest: Manifest object
        output_dir: Directory to write to

    Returns:
        Path to written manifest file
    """
    manifest_path = output_dir / "manifest.json"
    payload = manifest.model_dump(mode="json")
    manifest_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return manifest_path
