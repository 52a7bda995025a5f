"""postpress: lint and publish a collection of Markdown/MDX posts."""

__version__ = "0.1.0"
