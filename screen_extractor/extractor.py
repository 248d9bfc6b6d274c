"""Vision-model extractor: one request per image, no retries."""

from screen_extractor.client import ModelClient
from screen_extractor.config import ExtractorConfig
from screen_extractor.exceptions import ExtractionError
from screen_extractor.logger import Timer, get_logger
from screen_extractor.models import EncodedImage, ExtractionMode
from screen_extractor.prompts import build_system_prompt, build_user_prompt

logger = get_logger(__name__)

EXTRACT_MAX_OUTPUT_TOKENS = 4000


class VisionExtractor:
    """Sends the image plus mode-specific instructions to the extraction model.

    The reply is returned untouched. Whether it actually follows the
    requested format is left to the prompt; nothing is validated here.
    """

    def __init__(self, client: ModelClient) -> None:
        self.client = client

    def extract(
        self, image: EncodedImage, mode: ExtractionMode, config: ExtractorConfig
    ) -> str:
        """Extract text from ``image`` using the ``mode`` template.

        Args:
            image: Encoded capture
            mode: Resolved extraction mode
            config: Run configuration (model, confidence toggle)

        Returns:
            Raw reply text of the extraction model

        Raises:
            ExtractionError: If the model request fails for any reason
        """
        system_prompt = build_system_prompt(config.include_confidence)
        user_prompt = build_user_prompt(mode)

        logger.debug(
            "Starting extraction request",
            extra_data={
                "mode": mode.value,
                "model": config.extract_model,
                "image_bytes": image.size_bytes,
            },
        )

        with Timer("extraction") as timer:
            try:
                text = self.client.complete(
                    model=config.extract_model,
                    system_prompt=system_prompt,
                    user_prompt=user_prompt,
                    image=image,
                    max_output_tokens=EXTRACT_MAX_OUTPUT_TOKENS,
                )
            except Exception as exc:
                logger.error(
                    "Extraction request failed",
                    extra_data={
                        "mode": mode.value,
                        "model": config.extract_model,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                        "extraction_time_ms": timer.get_elapsed_ms(),
                    },
                )
                raise ExtractionError(str(exc) or type(exc).__name__) from exc

        logger.info(
            "Extraction request completed",
            extra_data={
                "mode": mode.value,
                "model": config.extract_model,
                "character_count": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text
