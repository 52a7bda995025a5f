"""Configuration constants and paths for postpress."""

import os
from pathlib import Path

# Default locations, relative to the working directory
CONTENT_DIR = Path(os.getenv("POSTPRESS_CONTENT_DIR", "content"))
OUT_DIR = Path(os.getenv("POSTPRESS_OUT_DIR", "site"))

SITE_TITLE = os.getenv("POSTPRESS_SITE_TITLE", "Posts")

# Post source formats
POST_SUFFIXES = (".md", ".mdx")

# Directories never scanned for posts or assets
IGNORED_DIRS = frozenset({"node_modules", "__pycache__", "dist", "build"})
IGNORED_FILES = frozenset({".DS_Store", "Thumbs.db"})

# Absolute asset paths (e.g. /images/x.png) are looked up under these
# content-root subdirectories after the content root itself.
STATIC_DIRS = ("static", "public")

# Front-matter keys with a defined meaning
FRONT_MATTER_KEYS = frozenset({"title", "description", "date", "published", "draft", "tags", "series"})

# Language tags accepted on fenced code blocks
KNOWN_LANGUAGES = frozenset(
    {
        "astro", "bash", "blade", "c", "console", "cpp", "csharp", "css", "diff",
        "dockerfile", "dotenv", "env", "go", "graphql", "html", "ini", "java",
        "javascript", "js", "json", "json5", "jsonc", "jsx", "kotlin", "less",
        "makefile", "markdown", "md", "mdx", "nginx", "php", "plaintext",
        "powershell", "python", "py", "ruby", "rust", "sass", "scss", "sh",
        "shell", "sql", "svelte", "swift", "text", "toml", "ts", "tsx", "txt",
        "typescript", "vue", "vue-html", "xml", "yaml", "yml", "zsh",
    }
) | frozenset(
    lang.strip().lower()
    for lang in os.getenv("POSTPRESS_EXTRA_LANGUAGES", "").split(",")
    if lang.strip()
)

# Reading-time estimate
WORDS_PER_MINUTE = 200

# Manifest versioning
SCHEMA_VERSION = 1

# Token counting model
TIKTOKEN_ENCODING = "cl100k_base"
