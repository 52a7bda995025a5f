"""Post loading, front matter and body scanning."""

from .blocks import BodyScan, CodeBlock, LinkRef, scan_body
from .collection import Collection, LoadError
from .frontmatter import FrontMatter, FrontMatterError, parse_front_matter, split_front_matter
from .post import Post, load_post, slugify

__all__ = [
    "BodyScan",
    "CodeBlock",
    "LinkRef",
    "scan_body",
    "Collection",
    "LoadError",
    "FrontMatter",
    "FrontMatterError",
    "parse_front_matter",
    "split_front_matter",
    "Post",
    "load_post",
    "slugify",
]
