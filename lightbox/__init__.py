"""Lightbox - directory-based image viewer with a neighbour-window cache."""

__version__ = "0.1.0"
