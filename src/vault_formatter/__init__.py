"""Automatic and on-demand prettier formatting for a document vault."""

__version__ = "0.3.0"
