"""Static site generator for a post collection."""

from __future__ import annotations

import datetime as dt
import logging
import posixpath
import shutil
from pathlib import Path, PurePosixPath

from pydantic import BaseModel

from ..config import SITE_TITLE, STATIC_DIRS
from ..content.blocks import is_external, split_target
from ..content.collection import Collection, tag_slug
from ..content.post import Post
from ..content.tokens import count_tokens, reading_minutes
from .llms_txt import generate_llms_txt, raw_source_href
from .manifest import SiteInfo, compute_sha256, create_manifest, write_manifest
from .markdown import HrefResolver, markdown_to_html
from .templates import (
    PostRow,
    html_doc,
    index_list,
    link,
    listing_page,
    pager,
    post_page,
    series_box,
    tag_links,
)

logger = logging.getLogger(__name__)


class BuildReport(BaseModel):
    """Result of building a site."""

    out_dir: Path
    posts: int
    tags: int
    series: int
    files: int
    total_bytes: int
    warnings: list[str]
    artifacts: list[str]


class _SiteWriter:
    """Writes site files and records their hashes."""

    def __init__(self, out_dir: Path):
        self.out_dir = out_dir
        self.artifacts: dict[str, str] = {}

    def write(self, rel: str, content: str) -> None:
        path = self.out_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        self.artifacts[rel] = compute_sha256(content)

    def copy(self, src: Path, rel: str) -> None:
        path = self.out_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, path)
        self.artifacts[rel] = compute_sha256(src.read_bytes())


def build_site(
    content_dir: Path,
    out_dir: Path,
    title: str = SITE_TITLE,
    base_url: str | None = None,
    include_drafts: bool = False,
    with_tokens: bool = False,
    today: dt.date | None = None,
) -> BuildReport:
    """Build a static HTML site from a directory of posts.

    Args:
        content_dir: Content root holding .md/.mdx posts and their assets
        out_dir: Site output directory
        title: Site title
        base_url: Optional public URL, recorded in the manifest
        include_drafts: Also publish drafts and future-dated posts
        with_tokens: Record tiktoken token counts in the manifest
        today: Reference date for scheduled posts (defaults to today)

    Returns:
        BuildReport with counts and warnings
    """
    today = today or dt.date.today()
    collection = Collection.load(content_dir)
    out_dir = _prepare_out_dir(out_dir.resolve(), collection.root)
    writer = _SiteWriter(out_dir)

    warnings: list[str] = [f"{e.path}: {e.message}" for e in collection.errors]
    for slug, paths in collection.duplicate_slugs.items():
        for path in paths[1:]:
            warnings.append(f"{path}: slug '{slug}' already used by {paths[0]}")
    for post in collection.posts:
        if post.date is None:
            warnings.append(f"{post.path}: no date in front matter, skipped")

    posts = collection.published(today, include_drafts=include_drafts)
    tags = collection.tags(posts)
    series = collection.series(posts)
    published_paths = {p.path for p in posts}

    # Assets keep their relative paths; static/ and public/ land at the root.
    for rel in collection.files:
        writer.copy(collection.root / rel, asset_destination(rel))

    for post in posts:
        _write_post(writer, collection, post, posts, series, published_paths, warnings, today)

    _write_indexes(writer, title, posts, tags, series, today)

    writer.write("llms.txt", generate_llms_txt(title, posts, series))

    tokens = {p.path: count_tokens(p.body) for p in posts} if with_tokens else None
    manifest = create_manifest(
        site=SiteInfo(title=title, base_url=base_url),
        posts=posts,
        tags=tags,
        series=series,
        artifacts=dict(sorted(writer.artifacts.items())),
        warnings=warnings,
        tokens=tokens,
    )
    write_manifest(manifest, out_dir)

    logger.info("Built %d posts into %s", len(posts), out_dir)
    return BuildReport(
        out_dir=out_dir,
        posts=len(posts),
        tags=len(tags),
        series=len(series),
        files=len(collection.files),
        total_bytes=_dir_size_bytes(out_dir),
        warnings=warnings,
        artifacts=sorted(writer.artifacts),
    )


def _prepare_out_dir(out_dir: Path, content_root: Path) -> Path:
    """Empty the output of a previous build so removed posts disappear.

    Raises:
        ValueError: If out_dir holds the content root, or is a non-empty
            directory without a manifest.json from an earlier build
    """
    if out_dir == content_root or out_dir in content_root.parents:
        raise ValueError(f"Output directory {out_dir} contains the content directory")
    if out_dir.exists():
        if any(out_dir.iterdir()) and not (out_dir / "manifest.json").is_file():
            raise ValueError(f"Refusing to clear {out_dir}: it is not a postpress site")
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True)
    return out_dir


def asset_destination(rel: str) -> str:
    parts = PurePosixPath(rel).parts
    if len(parts) > 1 and parts[0] in STATIC_DIRS:
        return "/".join(parts[1:])
    return rel


def page_href(from_dir: str, to_dir: str) -> str:
    """Relative href from one page directory to another page's index.html."""
    rel = posixpath.relpath(to_dir or ".", from_dir or ".")
    return "index.html" if rel == "." else f"{rel}/index.html"


def file_href(from_dir: str, to_file: str) -> str:
    return posixpath.relpath(to_file, from_dir or ".")


def tag_dir(tag: str) -> str:
    return f"tags/{tag_slug(tag)}"


def series_dir(name: str) -> str:
    return f"series/{tag_slug(name)}"


def _unique_tags(tags: list[str]) -> list[str]:
    # Spellings that share a tag page are linked once.
    seen: set[str] = set()
    unique = []
    for tag in tags:
        if tag_slug(tag) not in seen:
            seen.add(tag_slug(tag))
            unique.append(tag)
    return unique


def _make_resolver(
    collection: Collection,
    post: Post,
    published_paths: set[str],
    warnings: list[str],
) -> HrefResolver:
    def resolve(href: str, is_image: bool) -> str:
        if is_external(href):
            return href
        resolved = collection.resolve_link(post, href)
        if resolved is None:
            return href

        _, fragment = split_target(href)
        suffix = f"#{fragment}" if fragment else ""

        if resolved.kind == "file":
            return file_href(post.slug, asset_destination(resolved.path)) + suffix
        if resolved.kind == "page":
            return page_href(post.slug, resolved.path) + suffix

        target = resolved.post
        if target is None:
            return href
        if target.path not in published_paths:
            warnings.append(f"{post.path}: links to unpublished post {target.path}")
        return page_href(post.slug, target.slug) + suffix

    return resolve


def _write_post(
    writer: _SiteWriter,
    collection: Collection,
    post: Post,
    posts: list[Post],
    series: dict[str, list[Post]],
    published_paths: set[str],
    warnings: list[str],
    today: dt.date,
) -> None:
    here = post.slug
    resolver = _make_resolver(collection, post, published_paths, warnings)
    body_html = markdown_to_html(post.body, mdx=post.format == "mdx", resolve_href=resolver)

    meta_lines = [
        f"{post.date.isoformat() if post.date else ''} · {reading_minutes(post.body)} min read",
    ]
    if not post.is_published(today):
        meta_lines.append("Draft" if post.draft else "Scheduled")

    series_html = ""
    group = Collection.group_for(post.series, series) if post.series else None
    if group:
        name, items = group
        parts = [(p.title, None if p.path == post.path else page_href(here, p.slug)) for p in items]
        series_html = series_box(name, page_href(here, series_dir(name)), parts)

    older, newer = Collection.neighbors(post, posts)
    pager_html = pager(
        (older.title, page_href(here, older.slug)) if older else None,
        (newer.title, page_href(here, newer.slug)) if newer else None,
    )

    body = post_page(
        title=post.title,
        meta_lines=meta_lines,
        tags_html=tag_links((t, page_href(here, tag_dir(t))) for t in _unique_tags(post.tags)),
        description=post.description,
        series_html=series_html,
        body_html=body_html,
        pager_html=pager_html,
    )
    page = html_doc(
        title=post.title,
        header_left=link(page_href(here, ""), "← All posts"),
        header_right=f"{link(page_href(here, 'tags'), 'Tags')} {link(f'index.{post.format}', 'Raw')}",
        body=body,
        description=post.description,
    )
    writer.write(f"{here}/index.html", page)
    writer.copy(post.source_path, raw_source_href(post))


def _rows(posts: list[Post], from_dir: str, today: dt.date) -> list[PostRow]:
    return [
        PostRow(
            title=p.title,
            href=page_href(from_dir, p.slug),
            date=p.date.isoformat() if p.date else "",
            description=p.description,
            tags=[(t, page_href(from_dir, tag_dir(t))) for t in _unique_tags(p.tags)],
            draft=not p.is_published(today),
        )
        for p in posts
    ]


def _write_indexes(
    writer: _SiteWriter,
    title: str,
    posts: list[Post],
    tags: dict[str, list[Post]],
    series: dict[str, list[Post]],
    today: dt.date,
) -> None:
    def nav(from_dir: str) -> str:
        return f"{link(page_href(from_dir, 'tags'), 'Tags')} {link(file_href(from_dir, 'llms.txt'), 'llms.txt')}"

    # Root index
    writer.write(
        "index.html",
        html_doc(
            title=title,
            header_left=link("index.html", title),
            header_right=nav(""),
            body=listing_page(title, _rows(posts, "", today), intro=f"{len(posts)} posts"),
        ),
    )

    # Tag index and per-tag listings
    writer.write(
        "tags/index.html",
        html_doc(
            title=f"Tags · {title}",
            header_left=link(page_href("tags", ""), f"← {title}"),
            header_right=nav("tags"),
            body=index_list("Tags", [(t, page_href("tags", tag_dir(t)), len(items)) for t, items in tags.items()]),
        ),
    )
    for tag, items in tags.items():
        here = tag_dir(tag)
        writer.write(
            f"{here}/index.html",
            html_doc(
                title=f"#{tag} · {title}",
                header_left=link(page_href(here, ""), f"← {title}"),
                header_right=nav(here),
                body=listing_page(f"#{tag}", _rows(items, here, today)),
            ),
        )

    # Series listings in reading order
    for name, items in series.items():
        here = series_dir(name)
        writer.write(
            f"{here}/index.html",
            html_doc(
                title=f"{name} · {title}",
                header_left=link(page_href(here, ""), f"← {title}"),
                header_right=nav(here),
                body=listing_page(name, _rows(items, here, today), intro=f"A series in {len(items)} parts"),
            ),
        )


def _dir_size_bytes(path: Path) -> int:
    total = 0
    for p in path.rglob("*"):
        if p.is_file():
            total += p.stat().st_size
    return total
