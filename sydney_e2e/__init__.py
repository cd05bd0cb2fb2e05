"""End-to-end checks for the Sydney theme demo site."""

__version__ = "1.0.0"
