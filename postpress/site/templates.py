"""HTML templates for the static site generator."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from html import escape

from .styles import CSS


def html_doc(title: str, header_left: str, header_right: str, body: str, description: str | None = None) -> str:
    meta = f'<meta name="description" content="{escape(description, quote=True)}">\n' if description else ""
    return (
        "<!doctype html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"{meta}"
        f"<title>{escape(title)}</title>\n"
        f"<style>{CSS}</style>\n"
        "</head>\n"
        "<body>\n"
        "<header>\n"
        f"<div>{header_left}</div>\n"
        f"<nav>{header_right}</nav>\n"
        "</header>\n"
        f"<main>\n{body}\n</main>\n"
        "</body>\n"
        "</html>\n"
    )


def link(href: str, text: str) -> str:
    return f'<a href="{escape(href, quote=True)}">{escape(text)}</a>'


def h1(text: str) -> str:
    return f"<h1>{escape(text)}</h1>"


def h2(text: str) -> str:
    return f"<h2>{escape(text)}</h2>"


def muted(text: str) -> str:
    return f'<div class="muted">{escape(text)}</div>'


def rule() -> str:
    return '<div class="rule"></div>'


@dataclass(frozen=True)
class PostRow:
    title: str
    href: str
    date: str
    description: str | None
    tags: list[tuple[str, str]]  # (tag, href)
    draft: bool = False


def tag_links(tags: Iterable[tuple[str, str]]) -> str:
    items = [link(href, f"#{tag}") for tag, href in tags]
    if not items:
        return ""
    return f'<div class="tags muted">{" ".join(items)}</div>'


def post_list(rows: Iterable[PostRow]) -> str:
    lines = ['<ul class="posts">']
    for r in rows:
        meta = r.date + (" · draft" if r.draft else "")
        parts = [
            f'<div class="title">{link(r.href, r.title)}</div>',
            muted(meta),
        ]
        if r.description:
            parts.append(f"<div>{escape(r.description)}</div>")
        parts.append(tag_links(r.tags))
        lines.append("<li>" + "".join(parts) + "</li>")
    lines.append("</ul>")
    return "\n".join(lines)


def listing_page(heading: str, rows: Iterable[PostRow], intro: str | None = None) -> str:
    lines = [h1(heading)]
    if intro:
        lines.append(muted(intro))
    lines.append(post_list(rows))
    return "\n".join(lines)


def index_list(heading: str, items: Iterable[tuple[str, str, int]]) -> str:
    """Items: (label, href, post count)."""
    lines = [h1(heading), "<ul>"]
    for label, href, count in items:
        noun = "post" if count == 1 else "posts"
        lines.append(f'<li>{link(href, label)} <span class="muted">{count} {noun}</span></li>')
    lines.append("</ul>")
    return "\n".join(lines)


def series_box(name: str, href: str, parts: Iterable[tuple[str, str | None]]) -> str:
    """Parts: (title, href); href is None for the current post."""
    lines = ['<nav class="series">', f'<div class="muted">Series: {link(href, name)}</div>', "<ol>"]
    for title, part_href in parts:
        if part_href is None:
            lines.append(f'<li class="current">{escape(title)}</li>')
        else:
            lines.append(f"<li>{link(part_href, title)}</li>")
    lines.extend(["</ol>", "</nav>"])
    return "\n".join(lines)


def pager(older: tuple[str, str] | None, newer: tuple[str, str] | None) -> str:
    """Links to (title, href) of the neighboring posts."""
    left = link(older[1], f"← {older[0]}") if older else "<span></span>"
    right = link(newer[1], f"{newer[0]} →") if newer else "<span></span>"
    return f'<nav class="pager">{left}{right}</nav>'


def post_page(
    title: str,
    meta_lines: list[str],
    tags_html: str,
    description: str | None,
    series_html: str,
    body_html: str,
    pager_html: str,
) -> str:
    lines = ["<article>", h1(title)]
    lines.extend(muted(m) for m in meta_lines)
    if tags_html:
        lines.append(tags_html)
    if description:
        lines.append(f"<p><em>{escape(description)}</em></p>")
    if series_html:
        lines.append(series_html)
    lines.append(rule())
    lines.append(body_html)
    lines.append("</article>")
    lines.append(rule())
    lines.append(pager_html)
    return "\n".join(lines)
