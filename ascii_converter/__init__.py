"""Raster image to ASCII art converter."""

__version__ = "1.0.0"
