"""toolshelf: AI tool directory backend: URL extraction and catalog search."""

__version__ = "0.1.0"
