"""Local business-intelligence assistant for small shops."""

__version__ = "0.3.0"
