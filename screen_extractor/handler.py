"""Capture-to-clipboard orchestration."""

from pathlib import Path
from typing import Callable, Optional

from screen_extractor.capture import ScreenCapture
from screen_extractor.clipboard import copy_to_clipboard
from screen_extractor.client import ModelClient, OpenAIModelClient
from screen_extractor.config import ExtractorConfig
from screen_extractor.encoder import ImageEncoder
from screen_extractor.exceptions import CaptureError
from screen_extractor.extractor import VisionExtractor
from screen_extractor.logger import Timer, get_logger, set_run_id
from screen_extractor.models import (
    EncodedImage,
    ExtractionResult,
    RunOutcome,
    RunStatus,
)
from screen_extractor.notifier import Notifier
from screen_extractor.router import ModeRouter
from screen_extractor.sanitizer import sanitize

logger = get_logger(__name__)


class ExtractionHandler:
    def __init__(
        self,
        config: ExtractorConfig,
        client: Optional[ModelClient] = None,
        capture: Optional[ScreenCapture] = None,
        encoder: Optional[ImageEncoder] = None,
        router: Optional[ModeRouter] = None,
        extractor: Optional[VisionExtractor] = None,
        notifier: Optional[Notifier] = None,
        clipboard: Callable[[str], None] = copy_to_clipboard,
    ) -> None:
        """Initialize extraction handler.

        Args:
            config: Run configuration, shared by every component.
            client: Model client. If None, an OpenAI client is created lazily,
                so cancelled captures never touch the API.
            capture: Screen capture adapter. If None, creates default.
            encoder: Image encoder. If None, creates default from config.
            router: Mode router. If None, creates one around the client.
            extractor: Vision extractor. If None, creates one around the client.
            notifier: User-visible signals. If None, creates default.
            clipboard: Callable that writes the final text to the clipboard.
        """
        self.config = config
        self._client = client
        self.capture = capture or ScreenCapture(config.capture)
        self.encoder = encoder or ImageEncoder(max_dimension=config.max_image_dimension)
        self._router = router
        self._extractor = extractor
        self.notifier = notifier or Notifier(desktop=config.capture.notifications)
        self.clipboard = clipboard

    @property
    def client(self) -> ModelClient:
        if self._client is None:
            self._client = OpenAIModelClient(self.config)
        return self._client

    @property
    def router(self) -> ModeRouter:
        if self._router is None:
            self._router = ModeRouter(self.client)
        return self._router

    @property
    def extractor(self) -> VisionExtractor:
        if self._extractor is None:
            self._extractor = VisionExtractor(self.client)
        return self._extractor

    def run(self) -> RunOutcome:
        """Capture a region, extract its content and copy it to the clipboard.

        Never raises: every failure is reported through the notifier and
        returned as a failed ``RunOutcome``. A capture that cannot start is
        treated like a cancelled one.
        """
        set_run_id()
        logger.debug("Starting capture run", extra_data={"force_mode": self.config.force_mode})

        try:
            path = self.capture.capture()
        except CaptureError as exc:
            logger.warning("Screen capture unavailable", extra_data={"error": str(exc)})
            self.notifier.status(f"Screenshot cancelled: {exc}")
            return RunOutcome(status=RunStatus.CANCELLED, error=str(exc))

        if path is None:
            self.notifier.status("Screenshot cancelled")
            return RunOutcome(status=RunStatus.CANCELLED)

        try:
            self.notifier.status("Extracting data...")
            result = self.process_file(path)
            self.clipboard(result.text)
        except Exception as exc:
            message = str(exc) or "Unexpected error"
            logger.error(
                "Capture run failed",
                extra_data={"error_type": type(exc).__name__, "error": message},
                exc_info=self.config.debug_logging,
            )
            self.notifier.failure("Extraction failed", message)
            return RunOutcome(status=RunStatus.FAILED, error=message)
        finally:
            self.capture.cleanup(path)

        self.notifier.success("Copied extracted text", f"Mode: {result.mode.value}")
        logger.info(
            "Capture run completed",
            extra_data={"mode": result.mode.value, "characters": result.character_count},
        )
        return RunOutcome(status=RunStatus.SUCCESS, result=result)

    def process_file(self, path: Path) -> ExtractionResult:
        """Encode, route, extract and sanitize an image file.

        Raises:
            InvalidImageError: If the file cannot be read or is empty
            UnsupportedImageError: If the file is not a supported image
            ExtractionError: If the extraction request fails
        """
        return self.process_image(self.encoder.encode_file(path))

    def process_bytes(self, file_bytes: bytes, file_name: str) -> ExtractionResult:
        """Same as ``process_file`` for in-memory image bytes."""
        return self.process_image(self.encoder.encode_bytes(file_bytes, file_name))

    def process_image(self, image: EncodedImage) -> ExtractionResult:
        with Timer("pipeline") as timer:
            mode = self.router.decide(image, self.config)
            raw = self.extractor.extract(image, mode, self.config)
            sanitized = sanitize(
                raw,
                max_chars=self.config.max_output_chars,
                include_confidence=self.config.include_confidence,
            )

        logger.info(
            "Extracted text from image",
            extra_data={
                "mode": mode.value,
                "raw_characters": len(raw),
                "character_count": len(sanitized.text),
                "truncated": sanitized.truncated,
                "pipeline_time_ms": timer.get_elapsed_ms(),
            },
        )

        return ExtractionResult(
            text=sanitized.text,
            mode=mode,
            raw_text=raw,
            character_count=len(sanitized.text),
            truncated=sanitized.truncated,
            routed=self.config.forced_mode is None,
        )
