"""High-level API for screen extraction."""

from pathlib import Path
from typing import Optional

from screen_extractor.client import ModelClient
from screen_extractor.config import ExtractorConfig
from screen_extractor.exceptions import InvalidImageError
from screen_extractor.handler import ExtractionHandler
from screen_extractor.logger import set_run_id
from screen_extractor.models import ExtractionResult, RunOutcome


def capture_and_extract(
    config: Optional[ExtractorConfig] = None,
    client: Optional[ModelClient] = None,
) -> RunOutcome:
    """Interactively capture a screen region and copy its extracted text.

    Args:
        config: Run configuration. If None, loaded from the environment.
        client: Model client (optional, defaults to OpenAI)

    Returns:
        RunOutcome describing success, cancellation or failure
    """
    config = config or ExtractorConfig.from_env()
    return ExtractionHandler(config, client=client).run()


def extract_image(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
    client: Optional[ModelClient] = None,
) -> ExtractionResult:
    """Extract structured text from an existing image.

    Accepts either a file path or raw bytes. Nothing is copied to the
    clipboard; the caller gets the sanitized text back.

    Args:
        file_path: Path to an image file (alternative to file_bytes)
        file_bytes: Raw image bytes (alternative to file_path)
        file_name: Original filename (required if using file_bytes)
        config: Run configuration. If None, loaded from the environment.
        client: Model client (optional, defaults to OpenAI)

    Returns:
        ExtractionResult with sanitized text and the mode that was used

    Raises:
        ValueError: If neither or both of file_path and file_bytes are
            provided, or file_bytes is provided without file_name
        InvalidImageError: If the file is missing or empty
        UnsupportedImageError: If the image type is not supported
        ExtractionError: If the extraction request fails

    Examples:
        >>> result = extract_image(file_path="chart.png",
        ...                        config=ExtractorConfig(force_mode="chart"))
        >>> print(result.text)
    """
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and not file_bytes:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_bytes and not file_name:
        raise ValueError("file_name is required when using file_bytes")

    config = config or ExtractorConfig.from_env()
    handler = ExtractionHandler(config, client=client)
    set_run_id()

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise InvalidImageError(f"File not found: {file_path}")
        return handler.process_file(path)

    return handler.process_bytes(file_bytes, file_name)
