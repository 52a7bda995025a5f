"""Tests for the static site generator."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from postpress.site.build import asset_destination, build_site, page_href

TODAY = date(2024, 6, 1)

DYNAMIC = """\
---
title: Dynamic Layouts
date: 2024-01-10
description: Pick a layout per page
tags: [vue, inertia]
series: Layouts
---
Intro ![diagram](./img/diagram.png) and [next](./persistent-layouts.md#setup).

```vue
<template/>
```
"""

PERSISTENT = """\
---
title: Persistent Layouts
date: 2024-02-01
tags: [vue]
series: Layouts
---
## Setup

Body
"""


def _write(root: Path, rel: str, text: str | bytes) -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(text, bytes):
        path.write_bytes(text)
    else:
        path.write_text(text, encoding="utf-8")


class TestSiteBuild(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self.content = self.tmp / "content"
        _write(self.content, "posts/dynamic-layouts.md", DYNAMIC)
        _write(self.content, "posts/persistent-layouts.md", PERSISTENT)
        _write(self.content, "posts/draft.md", "---\ntitle: Draft\ndate: 2024-03-01\ndraft: true\n---\nWIP\n")
        _write(self.content, "posts/undated.md", "---\ntitle: Undated\n---\nNo date\n")
        _write(self.content, "posts/img/diagram.png", b"\x89PNG")
        _write(self.content, "static/favicon.ico", b"\x00\x00")

    def tearDown(self) -> None:
        self._td.cleanup()

    def _build(self, name: str = "site", **kwargs):
        out = self.tmp / name
        report = build_site(self.content, out, title="Tutorials", today=TODAY, **kwargs)
        return out, report

    def test_build_site_writes_pages(self) -> None:
        out, report = self._build()
        self.assertEqual(report.posts, 2)
        self.assertEqual(report.tags, 2)
        self.assertEqual(report.series, 1)

        for rel in [
            "index.html",
            "posts/dynamic-layouts/index.html",
            "posts/dynamic-layouts/index.md",
            "posts/persistent-layouts/index.html",
            "tags/index.html",
            "tags/vue/index.html",
            "tags/inertia/index.html",
            "series/layouts/index.html",
            "posts/img/diagram.png",
            "favicon.ico",
            "llms.txt",
            "manifest.json",
        ]:
            self.assertTrue((out / rel).exists(), rel)

        self.assertFalse((out / "posts/draft/index.html").exists())
        self.assertFalse((out / "posts/undated/index.html").exists())

    def test_post_page_rewrites_relative_targets(self) -> None:
        out, _ = self._build()
        html = (out / "posts/dynamic-layouts/index.html").read_text(encoding="utf-8")
        self.assertIn('src="../img/diagram.png"', html)
        self.assertIn('href="../persistent-layouts/index.html#setup"', html)
        self.assertIn('class="language-vue"', html)
        self.assertIn("Pick a layout per page", html)
        self.assertIn('href="../../tags/vue/index.html"', html)
        self.assertIn('href="../../series/layouts/index.html"', html)

    def test_index_lists_newest_first(self) -> None:
        out, _ = self._build()
        html = (out / "index.html").read_text(encoding="utf-8")
        first = html.index("posts/persistent-layouts/index.html")
        second = html.index("posts/dynamic-layouts/index.html")
        self.assertLess(first, second)

    def test_warnings_for_skipped_posts(self) -> None:
        _, report = self._build()
        self.assertTrue(any("posts/undated.md" in w for w in report.warnings))

    def test_manifest(self) -> None:
        out, _ = self._build()
        manifest = json.loads((out / "manifest.json").read_text(encoding="utf-8"))

        self.assertTrue(manifest["generated_at"].startswith("2024-02-01"))
        self.assertEqual(manifest["site"]["title"], "Tutorials")
        self.assertEqual(
            [p["slug"] for p in manifest["posts"]],
            ["posts/persistent-layouts", "posts/dynamic-layouts"],
        )
        self.assertIsNone(manifest["posts"][0]["tokens_approx"])
        self.assertEqual(manifest["series"], {"Layouts": ["posts/dynamic-layouts", "posts/persistent-layouts"]})
        self.assertIn("index.html", manifest["artifacts"])
        self.assertNotIn("manifest.json", manifest["artifacts"])

    def test_build_is_deterministic(self) -> None:
        out1, _ = self._build("site1")
        out2, _ = self._build("site2")
        self.assertEqual((out1 / "manifest.json").read_bytes(), (out2 / "manifest.json").read_bytes())
        self.assertEqual((out1 / "index.html").read_bytes(), (out2 / "index.html").read_bytes())

    def test_include_drafts(self) -> None:
        out, report = self._build(include_drafts=True)
        self.assertEqual(report.posts, 3)
        html = (out / "posts/draft/index.html").read_text(encoding="utf-8")
        self.assertIn("Draft", html)

    def test_with_tokens(self) -> None:
        with patch("postpress.site.build.count_tokens", return_value=7):
            out, _ = self._build(with_tokens=True)
        manifest = json.loads((out / "manifest.json").read_text(encoding="utf-8"))
        self.assertEqual({p["tokens_approx"] for p in manifest["posts"]}, {7})

    def test_llms_txt(self) -> None:
        out, _ = self._build()
        text = (out / "llms.txt").read_text(encoding="utf-8")
        self.assertIn("# Tutorials", text)
        self.assertIn("- [Dynamic Layouts](posts/dynamic-layouts/index.md): Pick a layout per page", text)
        self.assertIn("### Layouts", text)


class TestRebuildAndCollisions(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self.content = self.tmp / "content"
        self.out = self.tmp / "site"

    def tearDown(self) -> None:
        self._td.cleanup()

    def _build(self, **kwargs):
        return build_site(self.content, self.out, title="Tutorials", today=TODAY, **kwargs)

    def test_rebuild_removes_unpublished_pages(self) -> None:
        _write(self.content, "x.md", "---\ntitle: X\ndate: 2024-01-01\n---\nBody\n")
        _write(self.content, "y.md", "---\ntitle: Y\ndate: 2024-01-02\n---\nBody\n")
        self._build()
        self.assertTrue((self.out / "x/index.html").exists())

        _write(self.content, "x.md", "---\ntitle: X\ndate: 2024-01-01\ndraft: true\n---\nBody\n")
        report = self._build()

        self.assertFalse((self.out / "x/index.html").exists())
        self.assertFalse((self.out / "x/index.md").exists())
        self.assertTrue((self.out / "y/index.html").exists())
        self.assertNotIn("x/index.html", report.artifacts)

    def test_refuses_to_clear_foreign_directory(self) -> None:
        _write(self.content, "x.md", "---\ntitle: X\ndate: 2024-01-01\n---\nBody\n")
        _write(self.out, "notes.txt", "keep me")

        with self.assertRaises(ValueError):
            self._build()
        self.assertTrue((self.out / "notes.txt").exists())

    def test_post_under_tags_keeps_its_page(self) -> None:
        _write(self.content, "tags/vue.md", "---\ntitle: Vue\ndate: 2024-01-01\ntags: [vue]\n---\nVue post body\n")
        report = self._build()

        self.assertIn("Vue post body", (self.out / "tags-2/vue/index.html").read_text(encoding="utf-8"))
        self.assertIn("<h1>#vue</h1>", (self.out / "tags/vue/index.html").read_text(encoding="utf-8"))
        self.assertTrue(any("tags/vue.md" in w for w in report.warnings))

    def test_series_spellings_share_one_page(self) -> None:
        _write(self.content, "a.md", "---\ntitle: Part A\ndate: 2024-01-01\nseries: Vue Tips\n---\nA\n")
        _write(self.content, "b.md", "---\ntitle: Part B\ndate: 2024-01-02\nseries: vue tips\n---\nB\n")
        report = self._build()
        self.assertEqual(report.series, 1)

        listing = (self.out / "series/vue-tips/index.html").read_text(encoding="utf-8")
        self.assertIn("Part A", listing)
        self.assertIn("Part B", listing)
        self.assertIn("A series in 2 parts", listing)

        page = (self.out / "b/index.html").read_text(encoding="utf-8")
        self.assertIn("Part A", page)
        self.assertIn("Vue Tips", page)

    def test_duplicate_tag_spellings_link_once(self) -> None:
        _write(self.content, "a.md", "---\ntitle: A\ndate: 2024-01-01\ntags: [Vue, vue]\n---\nA\n")
        self._build()

        page = (self.out / "a/index.html").read_text(encoding="utf-8")
        self.assertEqual(page.count('href="../tags/vue/index.html"'), 1)
        listing = (self.out / "tags/vue/index.html").read_text(encoding="utf-8")
        self.assertEqual(listing.count('href="../../a/index.html"'), 1)


class TestHrefHelpers(unittest.TestCase):
    def test_page_href(self) -> None:
        self.assertEqual(page_href("", "posts/a"), "posts/a/index.html")
        self.assertEqual(page_href("posts/a", ""), "../../index.html")
        self.assertEqual(page_href("posts/a", "posts/b"), "../b/index.html")
        self.assertEqual(page_href("tags", "tags"), "index.html")

    def test_asset_destination(self) -> None:
        self.assertEqual(asset_destination("static/favicon.ico"), "favicon.ico")
        self.assertEqual(asset_destination("public/images/a.png"), "images/a.png")
        self.assertEqual(asset_destination("posts/img/a.png"), "posts/img/a.png")


if __name__ == "__main__":
    unittest.main()
