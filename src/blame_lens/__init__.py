"""blame-lens - inline git blame annotations."""

__version__ = "0.1.0"
