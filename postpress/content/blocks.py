"""Scan post bodies for fenced code blocks, links, images and headings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NamedTuple

FENCE_OPEN_PATTERN = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

# First token of an info string: "js{1,3}" -> "js", "vue:App.vue" -> "vue"
LANGUAGE_PATTERN = re.compile(r"^[^\s{:,]+")

INLINE_CODE_PATTERN = re.compile(r"(`+)(?:(?!\1).)+?\1")

_TARGET = r"\(\s*<?(?P<target>[^)\s>]*)>?(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
IMAGE_PATTERN = re.compile(r"!\[(?P<text>[^\]]*)\]" + _TARGET)
LINK_PATTERN = re.compile(r"(?<!!)\[(?P<text>[^\]]*)\]" + _TARGET)
LINK_DEFINITION_PATTERN = re.compile(r"^ {0,3}\[(?P<text>[^\]]+)\]:\s*<?(?P<target>[^\s>]+)>?")
HTML_IMG_PATTERN = re.compile(r"<img\b[^>]*?\bsrc\s*=\s*[\"'](?P<target>[^\"']+)[\"']", re.IGNORECASE)
HTML_LINK_PATTERN = re.compile(r"<a\b[^>]*?\bhref\s*=\s*[\"'](?P<target>[^\"']+)[\"']", re.IGNORECASE)

HEADING_PATTERN = re.compile(r"^ {0,3}(?P<hashes>#{1,6})\s+(?P<text>.+?)(?:\s+#+)?\s*$")

SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


class CodeBlock(NamedTuple):
    """A fenced code block found in a post body."""

    line: int
    fence: str
    info: str
    language: str | None
    content: str
    closed: bool


class LinkRef(NamedTuple):
    """A link or image reference found in a post body."""

    line: int
    text: str
    target: str
    is_image: bool


class Heading(NamedTuple):
    line: int
    level: int
    text: str


@dataclass
class BodyScan:
    """Everything of interest found in one post body."""

    code_blocks: list[CodeBlock] = field(default_factory=list)
    links: list[LinkRef] = field(default_factory=list)
    headings: list[Heading] = field(default_factory=list)

    @property
    def images(self) -> list[LinkRef]:
        return [link for link in self.links if link.is_image]


def language_of(info: str) -> str | None:
    """Return the language tag of a fence info string, or None."""
    m = LANGUAGE_PATTERN.match(info.strip())
    if not m:
        return None
    return m.group(0).lower()


def is_fence_close(line: str, fence: str) -> bool:
    stripped = line.strip()
    if len(line) - len(line.lstrip(" ")) > 3 or not stripped:
        return False
    char = fence[0]
    return set(stripped) == {char} and len(stripped) >= len(fence)


def open_fence(line: str) -> tuple[str, str] | None:
    """Return (fence, info) when the line opens a fenced code block."""
    m = FENCE_OPEN_PATTERN.match(line)
    if not m:
        return None
    fence = m.group("fence")
    info = m.group("info").strip()
    # Backtick fences may not carry backticks in their info string.
    if fence[0] == "`" and "`" in info:
        return None
    return fence, info


def scan_body(body: str, first_line: int = 1) -> BodyScan:
    """Scan a Markdown/MDX body.

    Args:
        body: Post body (front matter already removed)
        first_line: File line number of the body's first line

    Returns:
        BodyScan with code blocks, links/images and headings. Line numbers
        refer to the source file.
    """
    scan = BodyScan()
    lines = body.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    i = 0
    while i < len(lines):
        line = lines[i]
        lineno = first_line + i

        opened = open_fence(line)
        if opened:
            fence, info = opened
            content: list[str] = []
            closed = False
            i += 1
            while i < len(lines):
                if is_fence_close(lines[i], fence):
                    closed = True
                    break
                content.append(lines[i])
                i += 1
            scan.code_blocks.append(
                CodeBlock(
                    line=lineno,
                    fence=fence,
                    info=info,
                    language=language_of(info),
                    content="\n".join(content),
                    closed=closed,
                )
            )
            i += 1
            continue

        h = HEADING_PATTERN.match(line)
        if h:
            scan.headings.append(Heading(lineno, len(h.group("hashes")), h.group("text").strip()))

        scan.links.extend(_scan_line_links(line, lineno))
        i += 1

    return scan


def _scan_line_links(line: str, lineno: int) -> list[LinkRef]:
    text = INLINE_CODE_PATTERN.sub("", line)
    found: list[tuple[int, LinkRef]] = []

    d = LINK_DEFINITION_PATTERN.match(text)
    if d:
        return [LinkRef(lineno, d.group("text"), d.group("target"), False)]

    for m in IMAGE_PATTERN.finditer(text):
        found.append((m.start(), LinkRef(lineno, m.group("text"), m.group("target"), True)))
    # Blank out images so a linked image `[![alt](src)](href)` yields one link.
    text = IMAGE_PATTERN.sub(lambda m: "_" * len(m.group(0)), text)
    for m in LINK_PATTERN.finditer(text):
        found.append((m.start(), LinkRef(lineno, m.group("text"), m.group("target"), False)))
    for m in HTML_IMG_PATTERN.finditer(text):
        found.append((m.start(), LinkRef(lineno, "", m.group("target"), True)))
    for m in HTML_LINK_PATTERN.finditer(text):
        found.append((m.start(), LinkRef(lineno, "", m.group("target"), False)))

    found.sort(key=lambda item: item[0])
    return [ref for _, ref in found if ref.target]


def strip_code_blocks(body: str) -> str:
    """Return the body with fenced code blocks removed."""
    out: list[str] = []
    fence: str | None = None
    for line in body.replace("\r\n", "\n").split("\n"):
        if fence is None:
            opened = open_fence(line)
            if opened:
                fence = opened[0]
                continue
            out.append(line)
        elif is_fence_close(line, fence):
            fence = None
    return "\n".join(out)


def is_external(target: str) -> bool:
    """True for URLs with a scheme, protocol-relative URLs and pure fragments."""
    target = target.strip()
    return bool(SCHEME_PATTERN.match(target)) or target.startswith(("//", "#"))


def split_target(target: str) -> tuple[str, str]:
    """Split a link target into (path, fragment), dropping any query string."""
    path, _, fragment = target.strip().partition("#")
    path = path.split("?", 1)[0]
    return path, fragment
