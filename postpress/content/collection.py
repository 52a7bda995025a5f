"""Discover posts under a content root and index them."""

from __future__ import annotations

import datetime as dt
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterable, NamedTuple
from urllib.parse import unquote

from ..config import IGNORED_DIRS, IGNORED_FILES, POST_SUFFIXES, STATIC_DIRS
from .blocks import split_target
from .frontmatter import FrontMatterError
from .post import Post, load_post, slugify

logger = logging.getLogger(__name__)

# Top-level slugs owned by generated site pages
RESERVED_SLUGS = frozenset({"tags", "series"})


class LoadError(NamedTuple):
    """A post file that could not be loaded."""

    path: str
    line: int
    message: str


class Resolved(NamedTuple):
    """Target of an internal link.

    kind is "post", "file" (a non-post file under the content root) or
    "page" (a generated site page such as the index or a tag listing).
    """

    kind: str
    path: str
    post: Post | None = None


@dataclass
class Collection:
    """All posts and asset files under one content root."""

    root: Path
    posts: list[Post] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    errors: list[LoadError] = field(default_factory=list)
    duplicate_slugs: dict[str, list[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._reindex()

    @classmethod
    def load(cls, root: Path) -> Collection:
        """Load every post under root.

        Files that fail to load are recorded in `errors`; the rest load.
        """
        root = root.resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Content directory not found: {root}")

        posts: list[Post] = []
        files: list[str] = []
        errors: list[LoadError] = []

        for path in _walk(root):
            rel = path.relative_to(root).as_posix()
            if path.suffix.lower() not in POST_SUFFIXES:
                files.append(rel)
                continue
            if "/" not in rel and path.stem.upper() == "README":
                continue
            if PurePosixPath(rel).parts[0] in STATIC_DIRS:
                files.append(rel)
                continue
            try:
                posts.append(load_post(path, root))
            except FrontMatterError as e:
                errors.append(LoadError(rel, e.line, e.message))
            except (OSError, UnicodeDecodeError) as e:
                errors.append(LoadError(rel, 1, f"cannot read file: {e}"))

        collection = cls(root=root, files=files, errors=errors)
        collection._add_posts(posts)
        logger.debug(
            "Loaded %d posts, %d files, %d errors from %s",
            len(collection.posts),
            len(files),
            len(errors),
            root,
        )
        return collection

    def _add_posts(self, posts: list[Post]) -> None:
        # First file in path order keeps a contested slug; later ones get a suffix.
        # Slugs under tags/ or series/ are moved out so generated pages never overwrite them.
        owners: dict[str, str] = {}
        for post in sorted(posts, key=lambda p: p.path):
            slug = post.slug
            head, sep, rest = slug.partition("/")
            if head in RESERVED_SLUGS:
                self.duplicate_slugs.setdefault(slug, [f"<{head} pages>"]).append(post.path)
                slug = _free_slug(head, sep + rest, owners)
            elif slug in owners:
                self.duplicate_slugs.setdefault(slug, [owners[slug]]).append(post.path)
                slug = _free_slug(slug, "", owners)
            if slug != post.slug:
                post = post.model_copy(update={"slug": slug})
            owners[slug] = post.path
            self.posts.append(post)
        self._reindex()

    def _reindex(self) -> None:
        self._by_slug = {p.slug: p for p in self.posts}
        self._by_path = {p.path: p for p in self.posts}
        self._files = set(self.files)

    def get(self, slug: str) -> Post | None:
        return self._by_slug.get(slug.strip("/"))

    def by_path(self, path: str) -> Post | None:
        return self._by_path.get(path)

    def has_file(self, path: str) -> bool:
        return path in self._files

    def published(self, today: dt.date | None = None, include_drafts: bool = False) -> list[Post]:
        """Visible posts, newest first (ties broken by title).

        With include_drafts, drafts and scheduled posts are listed too;
        undated posts never are.
        """
        today = today or dt.date.today()
        visible = [
            p
            for p in self.posts
            if p.is_published(today) or (include_drafts and p.date is not None)
        ]
        visible.sort(key=lambda p: (p.title.lower(), p.path))
        visible.sort(key=lambda p: p.date or dt.date.min, reverse=True)
        return visible

    def tags(self, posts: list[Post] | None = None) -> dict[str, list[Post]]:
        """Group posts by tag. Tags differing only in case or punctuation merge.

        The first spelling seen names the group; a post is listed once per group.
        """
        posts = self.posts if posts is None else posts
        return _group_by_slug((post, post.tags) for post in posts)

    def series(self, posts: list[Post] | None = None) -> dict[str, list[Post]]:
        """Group posts by series, each series in reading (date) order.

        Series names merge the same way tags do.
        """
        posts = self.posts if posts is None else posts
        groups = _group_by_slug((post, [post.series] if post.series else []) for post in posts)
        for items in groups.values():
            items.sort(key=lambda p: (p.date or dt.date.max, p.path))
        return groups

    @staticmethod
    def group_for(name: str, groups: dict[str, list[Post]]) -> tuple[str, list[Post]] | None:
        """Find the tag or series group a spelling of name was merged into."""
        key = tag_slug(name)
        for group_name, items in groups.items():
            if tag_slug(group_name) == key:
                return group_name, items
        return None

    @staticmethod
    def neighbors(post: Post, posts: list[Post]) -> tuple[Post | None, Post | None]:
        """(older, newer) neighbors of post within a newest-first list."""
        try:
            i = next(n for n, p in enumerate(posts) if p.path == post.path)
        except StopIteration:
            return None, None
        older = posts[i + 1] if i + 1 < len(posts) else None
        newer = posts[i - 1] if i > 0 else None
        return older, newer

    def resolve_link(self, post: Post, target: str) -> Resolved | None:
        """Resolve an internal link or image target found in post.

        Returns None when nothing under the content root matches. Callers
        filter external targets first (see blocks.is_external).
        """
        path, _ = split_target(target)
        path = unquote(path)
        if not path:
            return Resolved("post", post.path, post)

        absolute = path.startswith("/")

        if PurePosixPath(path).suffix.lower() in POST_SUFFIXES:
            rel = _normalize(path.lstrip("/") if absolute else posixpath.join(str(post.directory), path))
            target_post = self.by_path(rel) if rel else None
            return Resolved("post", rel, target_post) if target_post else None

        for candidate in self._file_candidates(post, path, absolute):
            if candidate and self.has_file(candidate):
                return Resolved("file", candidate)

        if absolute:
            slug = _normalize(path.lstrip("/"))
        else:
            slug = _normalize(posixpath.join(post.slug, path))
        if slug is None:
            return None
        if slug.endswith("index.html"):
            slug = slug[: -len("index.html")]
        slug = slug.strip("/")

        if slug == "" or slug.split("/", 1)[0] in RESERVED_SLUGS:
            return Resolved("page", slug)
        target_post = self.get(slug)
        if target_post:
            return Resolved("post", target_post.path, target_post)
        return None

    def _file_candidates(self, post: Post, path: str, absolute: bool) -> list[str | None]:
        if not absolute:
            return [_normalize(posixpath.join(str(post.directory), path))]
        rel = path.lstrip("/")
        return [_normalize(rel)] + [_normalize(posixpath.join(d, rel)) for d in STATIC_DIRS]


def tag_slug(tag: str) -> str:
    return slugify(tag) or tag.strip().lower()


def _group_by_slug(entries: Iterable[tuple[Post, list[str]]]) -> dict[str, list[Post]]:
    names: dict[str, str] = {}
    groups: dict[str, list[Post]] = {}
    for post, labels in entries:
        for label in labels:
            key = tag_slug(label)
            names.setdefault(key, label)
            group = groups.setdefault(key, [])
            if not group or group[-1] is not post:
                group.append(post)
    return {names[k]: groups[k] for k in sorted(groups, key=lambda k: names[k].lower())}


def _free_slug(stem: str, tail: str, owners: dict[str, str]) -> str:
    n = 2
    while f"{stem}-{n}{tail}" in owners:
        n += 1
    return f"{stem}-{n}{tail}"


def _normalize(path: str) -> str | None:
    """Normalize a root-relative POSIX path; None if it escapes the root."""
    norm = posixpath.normpath(path)
    if norm == ".":
        return ""
    if norm == ".." or norm.startswith("../") or norm.startswith("/"):
        return None
    return norm


def _walk(root: Path) -> list[Path]:
    found: list[Path] = []
    for path in sorted(root.rglob("*")):
        rel_parts = path.relative_to(root).parts
        if any(part.startswith(".") or part in IGNORED_DIRS for part in rel_parts):
            continue
        if path.is_file() and path.name not in IGNORED_FILES:
            found.append(path)
    return found
