"""Tests for front-matter splitting and validation."""

import unittest
from datetime import date, datetime

from postpress.content.frontmatter import (
    FrontMatterError,
    parse_front_matter,
    render_front_matter,
    split_front_matter,
)


class TestSplitFrontMatter(unittest.TestCase):
    def test_no_front_matter(self) -> None:
        data, body, body_line = split_front_matter("# Hello\n\nText\n")
        self.assertEqual(data, {})
        self.assertEqual(body, "# Hello\n\nText\n")
        self.assertEqual(body_line, 1)

    def test_splits_yaml_block(self) -> None:
        text = "---\ntitle: Hello\ntags: [vue, php]\n---\nBody\n"
        data, body, body_line = split_front_matter(text)
        self.assertEqual(data, {"title": "Hello", "tags": ["vue", "php"]})
        self.assertEqual(body, "Body\n")
        self.assertEqual(body_line, 5)

    def test_normalizes_line_endings(self) -> None:
        data, body, _ = split_front_matter("---\r\ntitle: A\r\n---\r\nLine 1\r\nLine 2")
        self.assertEqual(data, {"title": "A"})
        self.assertEqual(body, "Line 1\nLine 2")

    def test_empty_block(self) -> None:
        data, body, body_line = split_front_matter("---\n---\nBody")
        self.assertEqual(data, {})
        self.assertEqual(body, "Body")
        self.assertEqual(body_line, 3)

    def test_unterminated_block_raises(self) -> None:
        with self.assertRaises(FrontMatterError) as ctx:
            split_front_matter("---\ntitle: Hello\n\nBody\n", path="posts/a.md")
        self.assertIn("never closed", str(ctx.exception))
        self.assertIn("posts/a.md", str(ctx.exception))

    def test_invalid_yaml_raises(self) -> None:
        with self.assertRaises(FrontMatterError):
            split_front_matter("---\ntitle: [unclosed\n---\nBody\n")

    def test_non_mapping_raises(self) -> None:
        with self.assertRaises(FrontMatterError):
            split_front_matter("---\n- a\n- b\n---\nBody\n")

    def test_impossible_calendar_date_raises(self) -> None:
        for day in ("2024-02-30", "2024-13-01"):
            with self.assertRaises(FrontMatterError) as ctx:
                split_front_matter(f"---\ntitle: A\ndate: {day}\n---\nBody\n", path="posts/a.md")
            self.assertIn("invalid YAML", str(ctx.exception))


class TestParseFrontMatter(unittest.TestCase):
    def test_published_is_alias_for_date(self) -> None:
        fm = parse_front_matter({"title": "T", "published": "2024-03-01"})
        self.assertEqual(fm.date, date(2024, 3, 1))
        self.assertEqual(fm.extra_keys, [])

    def test_date_wins_over_published(self) -> None:
        fm = parse_front_matter({"date": date(2024, 1, 1), "published": date(2023, 1, 1)})
        self.assertEqual(fm.date, date(2024, 1, 1))

    def test_blank_date_falls_back_to_published(self) -> None:
        fm = parse_front_matter({"date": "", "published": date(2024, 1, 1)})
        self.assertEqual(fm.date, date(2024, 1, 1))

    def test_datetime_reduced_to_date(self) -> None:
        fm = parse_front_matter({"date": datetime(2024, 5, 6, 10, 30)})
        self.assertEqual(fm.date, date(2024, 5, 6))

    def test_iso_datetime_string(self) -> None:
        fm = parse_front_matter({"date": "2024-05-06T10:30:00Z"})
        self.assertEqual(fm.date, date(2024, 5, 6))

    def test_tags_from_comma_string(self) -> None:
        fm = parse_front_matter({"tags": "vue, storybook, ,vue"})
        self.assertEqual(fm.tags, ["vue", "storybook"])

    def test_tags_keep_order(self) -> None:
        fm = parse_front_matter({"tags": ["php", "laravel", "eloquent"]})
        self.assertEqual(fm.tags, ["php", "laravel", "eloquent"])

    def test_unknown_keys_kept(self) -> None:
        fm = parse_front_matter({"title": "x", "layout": "post", "author": "a"})
        self.assertEqual(fm.extra_keys, ["author", "layout"])
        self.assertEqual(fm.extra["layout"], "post")

    def test_blank_title_is_none(self) -> None:
        fm = parse_front_matter({"title": "   "})
        self.assertIsNone(fm.title)

    def test_draft_defaults_false(self) -> None:
        self.assertFalse(parse_front_matter({}).draft)
        self.assertFalse(parse_front_matter({"draft": None}).draft)
        self.assertTrue(parse_front_matter({"draft": True}).draft)

    def test_invalid_date_raises(self) -> None:
        with self.assertRaises(FrontMatterError) as ctx:
            parse_front_matter({"date": "next tuesday"}, path="posts/a.md")
        self.assertIn("date", str(ctx.exception))

    def test_tags_mapping_raises(self) -> None:
        with self.assertRaises(FrontMatterError):
            parse_front_matter({"tags": {"a": 1}})


class TestRenderFrontMatter(unittest.TestCase):
    def test_rendered_block_parses_back(self) -> None:
        data = {"title": "Hello", "date": date(2024, 1, 2), "draft": True, "tags": ["a"]}
        parsed, body, _ = split_front_matter(render_front_matter(data) + "\nBody\n")
        self.assertEqual(parsed, data)
        self.assertEqual(body, "\nBody\n")


if __name__ == "__main__":
    unittest.main()
