"""Tile puzzle game: collect every coin, avoid enemies, reach the exit."""

__version__ = "1.0.0"