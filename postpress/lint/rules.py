"""Content-lint rules for a post collection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator

from ..config import KNOWN_LANGUAGES
from ..content.blocks import BodyScan, is_external
from ..content.collection import Collection
from ..content.post import Post
from .report import LintIssue, LintReport

logger = logging.getLogger(__name__)

PostRule = Callable[[Post, BodyScan, Collection], Iterable[LintIssue]]


def _issue(post: Post, rule: str, severity: str, message: str, line: int | None = None) -> LintIssue:
    return LintIssue(
        path=post.path,
        line=line if line is not None else 1,
        rule=rule,
        severity=severity,  # type: ignore[arg-type]
        message=message,
    )


def check_front_matter(post: Post, scan: BodyScan, collection: Collection) -> Iterator[LintIssue]:
    fm = post.front_matter
    if not fm.title:
        yield _issue(post, "missing-title", "error", "front matter has no title")
    if fm.date is None:
        yield _issue(post, "missing-date", "error", "front matter has no date (or published) field")
    if not fm.description:
        yield _issue(post, "missing-description", "warning", "front matter has no description")
    for key in fm.extra_keys:
        yield _issue(post, "unknown-key", "warning", f"unrecognized front-matter key '{key}'")


def make_code_block_check(known_languages: Iterable[str]) -> PostRule:
    known = frozenset(lang.lower() for lang in known_languages)

    def check_code_blocks(post: Post, scan: BodyScan, collection: Collection) -> Iterator[LintIssue]:
        for block in scan.code_blocks:
            if not block.closed:
                yield _issue(
                    post, "unclosed-code-block", "error", f"code fence {block.fence} is never closed", block.line
                )
            if block.language is None:
                yield _issue(post, "code-language", "error", "fenced code block has no language tag", block.line)
            elif block.language not in known:
                yield _issue(
                    post,
                    "unknown-language",
                    "warning",
                    f"unrecognized code block language '{block.language}'",
                    block.line,
                )

    return check_code_blocks


def check_links(post: Post, scan: BodyScan, collection: Collection) -> Iterator[LintIssue]:
    for link in scan.links:
        if is_external(link.target):
            continue
        if collection.resolve_link(post, link.target) is not None:
            continue
        if link.is_image:
            yield _issue(post, "missing-image", "error", f"image not found: {link.target}", link.line)
        else:
            yield _issue(post, "broken-link", "error", f"link target not found: {link.target}", link.line)


def check_duplicate_slug(post: Post, scan: BodyScan, collection: Collection) -> Iterator[LintIssue]:
    for slug, paths in collection.duplicate_slugs.items():
        if post.path in paths[1:]:
            yield _issue(
                post,
                "duplicate-slug",
                "error",
                f"slug '{slug}' is already used by {paths[0]}; published as '{post.slug}'",
            )


def default_rules(known_languages: Iterable[str] = KNOWN_LANGUAGES) -> list[PostRule]:
    return [
        check_front_matter,
        check_duplicate_slug,
        make_code_block_check(known_languages),
        check_links,
    ]


def lint_collection(
    collection: Collection,
    known_languages: Iterable[str] = KNOWN_LANGUAGES,
    rules: list[PostRule] | None = None,
) -> LintReport:
    """Run every rule over every post in a collection.

    Args:
        collection: Loaded content tree
        known_languages: Accepted code block language tags
        rules: Override the default rule set

    Returns:
        LintReport with issues sorted by path, line and rule
    """
    rules = rules if rules is not None else default_rules(known_languages)
    issues: list[LintIssue] = [
        LintIssue(path=e.path, line=e.line, rule="load-error", severity="error", message=e.message)
        for e in collection.errors
    ]

    for post in collection.posts:
        scan = post.scan()
        for rule in rules:
            issues.extend(rule(post, scan, collection))

    issues.sort(key=lambda i: (i.path, i.line, i.rule))
    logger.debug("Linted %d posts: %d issues", len(collection.posts), len(issues))
    return LintReport(posts_checked=len(collection.posts) + len(collection.errors), issues=issues)
