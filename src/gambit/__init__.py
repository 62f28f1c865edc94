"""Gambit: chess session manager with move history and dual clocks."""

__version__ = "0.1.0"
