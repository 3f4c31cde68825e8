"""Keep a directory of git working copies in sync with a GitHub team."""

__version__ = "0.1.0"
