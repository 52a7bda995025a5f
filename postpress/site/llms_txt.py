"""Generate the llms.txt index of a built site."""

from ..content.post import Post


def generate_llms_txt(
    title: str,
    posts: list[Post],
    series: dict[str, list[Post]],
    description: str | None = None,
) -> str:
    """Generate site-level llms.txt content.

    Posts link to their raw Markdown copies so readers get the source text.

    Args:
        title: Site title
        posts: Published posts, newest first
        series: Series -> posts in reading order
        description: Optional one-line site summary

    Returns:
        llms.txt content as string
    """
    lines = [f"# {title}", ""]
    if description:
        lines.extend([f"> {description}", ""])

    lines.extend(["## Posts", ""])
    for post in posts:
        entry = f"- [{post.title}]({raw_source_href(post)})"
        if post.description:
            entry += f": {post.description}"
        lines.append(entry)
    lines.append("")

    if series:
        lines.extend(["## Series", ""])
        for name, items in series.items():
            lines.append(f"### {name}")
            lines.append("")
            for post in items:
                lines.append(f"- [{post.title}]({raw_source_href(post)})")
            lines.append("")

    lines.extend(["## Optional", "", "- [Manifest](manifest.json)", ""])
    return "\n".join(lines)


def raw_source_href(post: Post) -> str:
    """Site-relative path of a post's raw source copy."""
    return f"{post.slug}/index.{post.format}"

