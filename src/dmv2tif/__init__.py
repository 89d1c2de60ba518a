"""Slovenian DMV XYZ sheet to raster conversion."""

__version__ = "0.1.0"
