"""Streamliner: normalize issues, releases, feeds and web pages into one item schema."""

__version__ = "0.1.0"
