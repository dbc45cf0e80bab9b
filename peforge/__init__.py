"""Sections, rich data, relocations, TLS and resource trees of Portable Executable images."""

__version__ = "0.1.0"