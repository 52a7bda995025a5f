"""Static site generation."""

from .build import BuildReport, build_site
from .manifest import Manifest, PostEntry, SiteInfo
from .markdown import markdown_to_html

__all__ = [
    "build_site",
    "BuildReport",
    "Manifest",
    "PostEntry",
    "SiteInfo",
    "markdown_to_html",
]
