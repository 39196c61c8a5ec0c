"""Faceted filtering and listing engine for a catalog browsing surface."""

__version__ = "0.1.0"
