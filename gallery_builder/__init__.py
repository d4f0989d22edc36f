"""Build-time toolkit for a multi-language gallery and blog site."""

__version__ = "1.0.0"
