"""Screen region to structured text, via a vision language model."""

from screen_extractor.api import capture_and_extract, extract_image
from screen_extractor.capture import ScreenCapture
from screen_extractor.client import ModelClient, OpenAIModelClient
from screen_extractor.config import CaptureConfig, ExtractorConfig
from screen_extractor.detector import ImageDescriptor, ImageDetector
from screen_extractor.encoder import ImageEncoder
from screen_extractor.exceptions import (
    CaptureError,
    ClipboardError,
    ConfigurationError,
    ExtractionError,
    InvalidImageError,
    ScreenExtractorError,
    UnsupportedImageError,
)
from screen_extractor.extractor import VisionExtractor
from screen_extractor.handler import ExtractionHandler
from screen_extractor.models import (
    EncodedImage,
    ExtractionMode,
    ExtractionResult,
    RouterDecision,
    RunOutcome,
    RunStatus,
)
from screen_extractor.router import ModeRouter, parse_router_reply
from screen_extractor.sanitizer import sanitize_output

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "capture_and_extract",
    "extract_image",
    # Core classes
    "ExtractionHandler",
    "ModeRouter",
    "VisionExtractor",
    "ImageEncoder",
    "ImageDetector",
    "ScreenCapture",
    "ModelClient",
    "OpenAIModelClient",
    # Functions
    "parse_router_reply",
    "sanitize_output",
    # Data models
    "EncodedImage",
    "ExtractionMode",
    "ExtractionResult",
    "ImageDescriptor",
    "RouterDecision",
    "RunOutcome",
    "RunStatus",
    # Configuration
    "ExtractorConfig",
    "CaptureConfig",
    # Exceptions
    "ScreenExtractorError",
    "ConfigurationError",
    "CaptureError",
    "UnsupportedImageError",
    "InvalidImageError",
    "ExtractionError",
    "ClipboardError",
]
