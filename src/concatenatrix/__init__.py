"""Concatenate the text files tracked by a git repository into one stream."""

__version__ = "0.3.0"
