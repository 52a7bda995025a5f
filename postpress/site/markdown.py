"""Minimal Markdown/MDX -> HTML converter (CommonMark-ish subset).

The goal is readable, deterministic output, not perfect rendering. Output
is escaped by default; raw HTML in a body is shown as text.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from ..content.blocks import HEADING_PATTERN, is_fence_close, open_fence
from ..content.post import slugify

HrefResolver = Callable[[str, bool], str]

MDX_STATEMENT_PATTERN = re.compile(r"^(?:import|export)\s")
JSX_TAG_PATTERN = re.compile(r"^\s*</?[A-Z][\w.]*")
ORDERED_ITEM_PATTERN = re.compile(r"^\d+[.)]\s+")

UNSAFE_SCHEMES = ("javascript:", "data:", "vbscript:")


def markdown_to_html(md: str, mdx: bool = False, resolve_href: HrefResolver | None = None) -> str:
    """Render a post body to an HTML fragment.

    Args:
        md: Markdown body (front matter removed)
        mdx: Drop MDX import/export statements and JSX component tag lines
        resolve_href: Optional callback (href, is_image) -> href used to
            rewrite link and image targets

    Returns:
        HTML fragment
    """
    md = md.replace("\r\n", "\n").replace("\r", "\n")
    lines = md.split("\n")
    if mdx:
        lines = _strip_mdx(lines)

    out: list[str] = []
    heading_ids: dict[str, int] = {}

    def inline(text: str) -> str:
        return _inline(text, resolve_href)

    def flush_paragraph(buf: list[str]) -> None:
        if not buf:
            return
        text = " ".join(s.strip() for s in buf if s.strip())
        if text:
            out.append(f"<p>{inline(text)}</p>")
        buf.clear()

    i = 0
    para_buf: list[str] = []

    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        # Fenced code
        opened = open_fence(line)
        if opened:
            flush_paragraph(para_buf)
            fence, info = opened
            code_buf: list[str] = []
            i += 1
            while i < len(lines) and not is_fence_close(lines[i], fence):
                code_buf.append(lines[i])
                i += 1
            i += 1
            out.append(_code_block("\n".join(code_buf), info))
            continue

        # Horizontal rule
        if re.fullmatch(r"(?:-\s*){3,}|(?:\*\s*){3,}|(?:_\s*){3,}", stripped):
            flush_paragraph(para_buf)
            out.append("<hr>")
            i += 1
            continue

        # Table (GFM)
        if _looks_like_table_start(lines, i):
            flush_paragraph(para_buf)
            table_lines: list[str] = []
            while i < len(lines) and lines[i].strip().startswith("|"):
                table_lines.append(lines[i])
                i += 1
            out.append(_table_to_html(table_lines, inline))
            continue

        # Headings
        heading = HEADING_PATTERN.match(line)
        if heading:
            flush_paragraph(para_buf)
            level = len(heading.group("hashes"))
            text = heading.group("text").strip()
            anchor = _unique_id(slugify(_plain(text)) or "section", heading_ids)
            out.append(f'<h{level} id="{anchor}">{inline(text)}</h{level}>')
            i += 1
            continue

        # Unordered list
        if stripped.startswith(("- ", "* ", "+ ")):
            flush_paragraph(para_buf)
            out.append("<ul>")
            while i < len(lines):
                s = lines[i].strip()
                if not s.startswith(("- ", "* ", "+ ")):
                    break
                out.append(f"<li>{inline(s[2:].strip())}</li>")
                i += 1
            out.append("</ul>")
            continue

        # Ordered list
        if ORDERED_ITEM_PATTERN.match(stripped):
            flush_paragraph(para_buf)
            start = int(re.match(r"\d+", stripped).group(0))
            out.append("<ol>" if start == 1 else f'<ol start="{start}">')
            while i < len(lines):
                s = lines[i].strip()
                m = ORDERED_ITEM_PATTERN.match(s)
                if not m:
                    break
                out.append(f"<li>{inline(s[m.end() :])}</li>")
                i += 1
            out.append("</ol>")
            continue

        # Blockquote
        if stripped.startswith(">"):
            flush_paragraph(para_buf)
            out.append("<blockquote>")
            quote_buf: list[str] = []
            while i < len(lines):
                s = lines[i].strip()
                if not s.startswith(">"):
                    break
                q = s[1:].strip()
                if q:
                    quote_buf.append(q)
                elif quote_buf:
                    out.append(f"<p>{inline(' '.join(quote_buf))}</p>")
                    quote_buf = []
                i += 1
            if quote_buf:
                out.append(f"<p>{inline(' '.join(quote_buf))}</p>")
            out.append("</blockquote>")
            continue

        # Blank line ends paragraph
        if not stripped:
            flush_paragraph(para_buf)
            i += 1
            continue

        # Default: paragraph text
        para_buf.append(line)
        i += 1

    flush_paragraph(para_buf)
    return "\n".join(out)


def _strip_mdx(lines: list[str]) -> list[str]:
    """Drop MDX statements and JSX component tag lines outside code fences."""
    kept: list[str] = []
    fence: str | None = None
    in_tag = False
    in_statement = False

    for line in lines:
        if fence is not None:
            kept.append(line)
            if is_fence_close(line, fence):
                fence = None
            continue
        if in_tag:
            in_tag = ">" not in line
            continue
        if in_statement:
            in_statement = bool(line.strip())
            continue

        opened = open_fence(line)
        if opened:
            fence = opened[0]
            kept.append(line)
            continue
        if MDX_STATEMENT_PATTERN.match(line):
            # Multi-line statements end at the next blank line.
            in_statement = not line.rstrip().endswith((";", "'", '"')) and "from" not in line
            continue
        if JSX_TAG_PATTERN.match(line):
            in_tag = ">" not in line
            continue
        kept.append(line)
    return kept


def _code_block(code: str, info: str) -> str:
    m = re.match(r"[^\s{:,]+", info)
    if m:
        lang = _escape_attr(m.group(0).lower())
        return f'<pre><code class="language-{lang}">{_escape_block(code)}</code></pre>'
    return f"<pre><code>{_escape_block(code)}</code></pre>"


def _unique_id(base: str, seen: dict[str, int]) -> str:
    count = seen.get(base, 0)
    seen[base] = count + 1
    return base if count == 0 else f"{base}-{count}"


def _plain(text: str) -> str:
    """Strip inline markup for anchor ids."""
    text = re.sub(r"!?\[([^\]]*)\]\([^)]*\)", r"\1", text)
    return re.sub(r"[`*_]", "", text)


def _escape_block(text: str) -> str:
    # Block escaping (pre/code) – keep newlines.
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _inline(text: str, resolve_href: HrefResolver | None = None) -> str:
    # Placeholder-based inline renderer (escape-by-default).
    replacements: list[str] = []
    text = text.replace("\x00", "")

    def stash(html: str) -> str:
        token = f"\x00{len(replacements)}\x00"
        replacements.append(html)
        return token

    def target(href: str, is_image: bool) -> str | None:
        href = _safe_href(href)
        if href and resolve_href is not None:
            href = resolve_href(href, is_image)
        return href

    text = re.sub(r"(`+)(.+?)\1", lambda m: stash(f"<code>{_escape_block(m.group(2).strip())}</code>"), text)

    def _image_repl(match: re.Match) -> str:
        src = target(match.group(2), True)
        alt = match.group(1)
        if not src:
            return alt
        return stash(f'<img src="{_escape_attr(src)}" alt="{_escape_attr(alt)}" loading="lazy">')

    text = re.sub(r"!\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)", _image_repl, text)

    def _link_repl(match: re.Match) -> str:
        href = target(match.group(2), False)
        label = match.group(1)
        if not href:
            return label
        # Label may hold a stashed image token; keep it intact.
        return stash(f'<a href="{_escape_attr(href)}">{_restore(_emphasis(_escape_block(label)), replacements)}</a>')

    text = re.sub(r"\[([^\]]+)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)", _link_repl, text)

    escaped = _emphasis(_escape_block(text))
    return _restore(escaped, replacements)


def _emphasis(text: str) -> str:
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])", r"<em>\1</em>", text)
    text = re.sub(r"(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)", r"<em>\1</em>", text)
    return text


def _restore(text: str, replacements: list[str]) -> str:
    # Later stashes may contain earlier tokens, so restore newest first.
    for idx in range(len(replacements) - 1, -1, -1):
        text = text.replace(f"\x00{idx}\x00", replacements[idx])
    return text


def _escape_attr(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _safe_href(href: str | None) -> str | None:
    if href is None:
        return None
    cleaned = href.strip()
    if not cleaned:
        return None
    if cleaned.lower().startswith(UNSAFE_SCHEMES):
        return None
    return cleaned


def _looks_like_table_start(lines: list[str], i: int) -> bool:
    if i + 1 >= len(lines):
        return False
    header = lines[i].strip()
    sep = lines[i + 1].strip()
    if not header.startswith("|") or not sep.startswith("|"):
        return False
    # Separator row contains --- columns
    return "---" in sep


def _table_to_html(table_lines: list[str], inline: Callable[[str], str]) -> str:
    # Basic GFM table parsing.
    rows = [[p.strip() for p in line.strip().strip("|").split("|")] for line in table_lines]
    if len(rows) < 2:
        return "<pre>" + _escape_block("\n".join(table_lines)) + "</pre>"

    out = ["<table>", "<thead>", "<tr>"]
    out.extend(f"<th>{inline(h)}</th>" for h in rows[0])
    out.extend(["</tr>", "</thead>", "<tbody>"])
    for r in rows[2:]:
        out.append("<tr>")
        out.extend(f"<td>{inline(c)}</td>" for c in r)
        out.append("</tr>")
    out.extend(["</tbody>", "</table>"])
    return "\n".join(out)
