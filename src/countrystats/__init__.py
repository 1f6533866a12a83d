"""Country statistics for english speaking programmers."""

__version__ = "0.1.0"
