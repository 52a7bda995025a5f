"""Tests for the postpress command line."""

from __future__ import annotations

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from postpress.cli import main
from postpress.content.post import load_post


def _run(*argv: str) -> tuple[int, str]:
    out = io.StringIO()
    with redirect_stdout(out), redirect_stderr(io.StringIO()):
        code = main(list(argv))
    return code, out.getvalue()


class TestCli(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.content = Path(self._td.name) / "content"

    def tearDown(self) -> None:
        self._td.cleanup()

    def test_new_scaffolds_draft(self) -> None:
        code, output = _run("new", "Storybook Mocks", "--content", str(self.content), "--tags", "storybook, vue")
        self.assertEqual(code, 0)
        path = self.content / "storybook-mocks.md"
        self.assertIn(str(path), output)

        post = load_post(path, self.content)
        self.assertEqual(post.title, "Storybook Mocks")
        self.assertTrue(post.draft)
        self.assertIsNotNone(post.date)
        self.assertEqual(post.tags, ["storybook", "vue"])

        code, _ = _run("new", "Storybook Mocks", "--content", str(self.content))
        self.assertEqual(code, 1)

    def test_lint_strict_fails_on_warnings(self) -> None:
        _run("new", "Icon Sets", "--content", str(self.content))

        code, output = _run("lint", "--content", str(self.content))
        self.assertEqual(code, 0)
        self.assertIn("[missing-description]", output)

        code, _ = _run("lint", "--content", str(self.content), "--strict")
        self.assertEqual(code, 1)

    def test_lint_fails_on_errors(self) -> None:
        self.content.mkdir(parents=True)
        (self.content / "a.md").write_text("No front matter\n", encoding="utf-8")
        code, output = _run("lint", "--content", str(self.content))
        self.assertEqual(code, 1)
        self.assertIn("a.md:1: error [missing-title]", output)

    def test_lint_missing_content_dir(self) -> None:
        code, _ = _run("lint", "--content", str(self.content / "missing"))
        self.assertEqual(code, 1)

    def test_list_hides_drafts(self) -> None:
        _run("new", "Factories", "--content", str(self.content))

        code, output = _run("list", "--content", str(self.content))
        self.assertEqual(code, 0)
        self.assertIn("No posts found", output)

        code, output = _run("list", "--content", str(self.content), "--drafts")
        self.assertEqual(code, 0)
        self.assertIn("factories.md [draft]", output)

    def test_build(self) -> None:
        self.content.mkdir(parents=True)
        (self.content / "hello.md").write_text(
            "---\ntitle: Hello\ndate: 2024-01-01\n---\nHi\n", encoding="utf-8"
        )
        out = Path(self._td.name) / "site"
        code, output = _run("build", "--content", str(self.content), "--out", str(out), "--title", "Blog")
        self.assertEqual(code, 0)
        self.assertIn("Posts: 1", output)
        self.assertTrue((out / "hello" / "index.html").exists())

    def test_version(self) -> None:
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            main(["--version"])
        self.assertEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
