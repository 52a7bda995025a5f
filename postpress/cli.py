"""CLI entry point for postpress."""

from __future__ import annotations

import argparse
import datetime as dt
import logging
import sys
from pathlib import Path
from typing import Any

from . import __version__
from .config import CONTENT_DIR, OUT_DIR, SITE_TITLE


def app(argv: list[str] | None = None) -> None:
    """Console script entrypoint."""
    raise SystemExit(main(argv))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="postpress",
        description="Lint and publish a collection of Markdown/MDX posts.",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"postpress {__version__}",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("list", help="List posts")
    p_list.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_list.add_argument("--drafts", action="store_true", help="Include drafts and scheduled posts")
    p_list.add_argument("--tag", "-t", help="Only posts with this tag")
    p_list.add_argument("--series", "-s", help="Only posts in this series")

    p_lint = sub.add_parser("lint", help="Check front matter, code blocks, links and images")
    p_lint.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_lint.add_argument("--strict", action="store_true", help="Fail on warnings too")

    p_build = sub.add_parser("build", help="Generate the static site")
    p_build.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_build.add_argument("--out", "-o", type=Path, default=OUT_DIR, help="Site output directory")
    p_build.add_argument("--title", default=SITE_TITLE, help="Site title")
    p_build.add_argument("--base-url", default=None, help="Public base URL (recorded in manifest.json)")
    p_build.add_argument("--drafts", action="store_true", help="Publish drafts and scheduled posts")
    p_build.add_argument("--with-tokens", action="store_true", help="Record tiktoken counts in manifest.json")

    p_new = sub.add_parser("new", help="Scaffold a new draft post")
    p_new.add_argument("title", help="Post title")
    p_new.add_argument("--content", "-c", type=Path, default=CONTENT_DIR, help="Content directory")
    p_new.add_argument("--tags", default="", help="Comma-separated tags")
    p_new.add_argument("--series", default=None, help="Series name")
    p_new.add_argument("--mdx", action="store_true", help="Create an .mdx file")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "list":
        return _cmd_list(args)
    if args.cmd == "lint":
        return _cmd_lint(args)
    if args.cmd == "build":
        return _cmd_build(args)
    if args.cmd == "new":
        return _cmd_new(args)

    parser.print_help()
    return 2


def _cmd_list(args: Any) -> int:
    from .content.collection import Collection, tag_slug

    try:
        collection = Collection.load(args.content)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    posts = collection.published(include_drafts=bool(args.drafts))
    if args.tag:
        wanted = tag_slug(args.tag)
        posts = [p for p in posts if any(tag_slug(t) == wanted for t in p.tags)]
    if args.series:
        group = Collection.group_for(args.series, collection.series(posts))
        posts = group[1] if group else []

    if not posts:
        print("No posts found")
        return 0

    today = dt.date.today()
    for p in posts:
        state = "" if p.is_published(today) else (" [draft]" if p.draft else " [scheduled]")
        print(f"  {p.date}  {p.path}{state}")
        print(f"              {p.title}")
    return 0


def _cmd_lint(args: Any) -> int:
    from .content.collection import Collection
    from .lint import lint_collection

    try:
        collection = Collection.load(args.content)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    report = lint_collection(collection)
    for issue in report.issues:
        print(issue.format())

    summary = f"{report.posts_checked} posts, {len(report.errors)} errors, {len(report.warnings)} warnings"
    if report.ok(strict=bool(args.strict)):
        print(f"✓ {summary}")
        return 0
    print(f"✗ {summary}", file=sys.stderr)
    return 1


def _cmd_build(args: Any) -> int:
    from .site.build import build_site

    try:
        report = build_site(
            args.content,
            args.out,
            title=args.title,
            base_url=args.base_url,
            include_drafts=bool(args.drafts),
            with_tokens=bool(args.with_tokens),
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("✓ Site generated")
    print(f"  Output: {report.out_dir}")
    print(f"  Posts: {report.posts}")
    print(f"  Tags: {report.tags}")
    print(f"  Series: {report.series}")
    print(f"  Size: {report.total_bytes / 1024:.1f} KB")

    if report.warnings:
        print(f"\nWarnings ({len(report.warnings)}):")
        for w in report.warnings[:10]:
            print(f"  - {w}")
        if len(report.warnings) > 10:
            print(f"  ... and {len(report.warnings) - 10} more")
    return 0


def _cmd_new(args: Any) -> int:
    from .content.frontmatter import render_front_matter
    from .content.post import slugify

    slug = slugify(args.title)
    if not slug:
        print("Error: title must contain letters or digits", file=sys.stderr)
        return 2

    suffix = ".mdx" if args.mdx else ".md"
    path = Path(args.content) / f"{slug}{suffix}"
    if path.exists():
        print(f"Error: {path} already exists", file=sys.stderr)
        return 1

    data: dict[str, Any] = {
        "title": args.title,
        "description": "",
        "date": dt.date.today(),
        "draft": True,
        "tags": [t.strip() for t in args.tags.split(",") if t.strip()],
    }
    if args.series:
        data["series"] = args.series

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_front_matter(data) + "\n", encoding="utf-8")
    print(f"✓ Created {path}")
    return 0


if __name__ == "__main__":
    app()
