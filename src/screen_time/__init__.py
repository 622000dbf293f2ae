"""Daily and weekly app usage summaries in the terminal."""

__version__ = "0.1.0"
