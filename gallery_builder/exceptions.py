"""Custom exceptions for the gallery build toolkit."""

from __future__ import annotations

from pathlib import Path


class GalleryBuildError(Exception):
    """Base exception for all gallery build errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(GalleryBuildError):
    """Raised when there's a configuration problem."""
    pass


# =============================================================================
# Fragment Errors
# =============================================================================


class FragmentError(GalleryBuildError):
    """Raised when a JSON5 fragment or consolidated file cannot be read."""

    def __init__(self, message: str, path: Path | str | None = None):
        """Initialize fragment error.

        Args:
            message: Error message
            path: File that failed to load
        """
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class MergeError(GalleryBuildError):
    """Raised when merging fragments into a consolidated file fails."""

    def __init__(self, message: str, collection: str | None = None):
        """Initialize merge error.

        Args:
            message: Error message
            collection: Collection being merged (e.g., 'images', 'articles')
        """
        super().__init__(message)
        self.collection = collection


class SplitError(GalleryBuildError):
    """Raised when a consolidated file cannot be split back into fragments."""

    def __init__(self, message: str, collection: str | None = None):
        super().__init__(message)
        self.collection = collection


# =============================================================================
# Card Resolution Errors
# =============================================================================


class CardResolutionError(GalleryBuildError):
    """Base exception for info card resolution errors."""
    pass


class CircularReferenceError(CardResolutionError):
    """Raised when a chain of ``from`` references loops back on itself."""

    def __init__(self, card_id: str):
        super().__init__(f"Circular reference detected: {card_id}")
        self.card_id = card_id


# =============================================================================
# Output Errors
# =============================================================================


class FeedError(GalleryBuildError):
    """Raised when feed generation fails."""
    pass


class ThumbnailError(GalleryBuildError):
    """Raised when thumbnail generation or image conversion fails."""
    pass


__all__ = [
    "GalleryBuildError",
    "ConfigurationError",
    "FragmentError",
    "MergeError",
    "SplitError",
    "CardResolutionError",
    "CircularReferenceError",
    "FeedError",
    "ThumbnailError",
]
