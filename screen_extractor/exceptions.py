"""Custom exceptions for screen extractor."""


class ScreenExtractorError(Exception):
    """Base exception for screen extractor errors."""

    pass


class ConfigurationError(ScreenExtractorError):
    """Raised when configuration values are missing or invalid."""

    pass


class CaptureError(ScreenExtractorError):
    """Raised when the screen capture utility cannot be run."""

    pass


class UnsupportedImageError(ScreenExtractorError):
    """Raised when the captured file is not a supported image type."""

    pass


class InvalidImageError(ScreenExtractorError):
    """Raised when image bytes are empty or cannot be decoded."""

    pass


class ExtractionError(ScreenExtractorError):
    """Raised when the extraction model request fails."""

    pass


class ClipboardError(ScreenExtractorError):
    """Raised when text cannot be written to the clipboard."""

    pass
