"""
Core helpers package for the POS order client.

This package contains configuration loading and header construction.
Keeping these helpers in a dedicated package makes it easy to swap
implementations or customise behaviour for testing.
"""

__all__ = []
