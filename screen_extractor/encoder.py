"""Image encoding for model requests."""

import base64
import io
from pathlib import Path
from typing import Optional

from PIL import Image

from screen_extractor.detector import ImageDescriptor, ImageDetector
from screen_extractor.exceptions import InvalidImageError, UnsupportedImageError
from screen_extractor.logger import Timer, get_logger
from screen_extractor.models import EncodedImage

logger = get_logger(__name__)

_PIL_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
}


class ImageEncoder:
    """Turns a captured image into an ``EncodedImage``.

    Images the model cannot read directly (TIFF, BMP) are re-encoded as PNG,
    and images whose longest side exceeds ``max_dimension`` are downscaled.
    """

    def __init__(
        self,
        max_dimension: int = 2048,
        detector: Optional[ImageDetector] = None,
    ) -> None:
        self.max_dimension = max_dimension
        self.detector = detector or ImageDetector()

    def encode_file(self, path: Path) -> EncodedImage:
        """Read and encode an image file.

        Raises:
            InvalidImageError: If the file cannot be read or is empty
            UnsupportedImageError: If the file is not a supported image
        """
        path = Path(path)
        try:
            file_bytes = path.read_bytes()
        except OSError as exc:
            raise InvalidImageError(f"Cannot read image file {path}: {exc}") from exc
        return self.encode_bytes(file_bytes, path.name)

    def encode_bytes(self, file_bytes: bytes, file_name: str) -> EncodedImage:
        """Encode raw image bytes.

        Raises:
            InvalidImageError: If the bytes are empty
            UnsupportedImageError: If the bytes are not a supported image
        """
        if not file_bytes:
            raise InvalidImageError(f"Image {file_name} is empty")

        try:
            descriptor = self.detector.detect(file_bytes, file_name)
        except ValueError as exc:
            raise UnsupportedImageError(str(exc)) from exc

        with Timer("image_encode") as timer:
            mime_type = descriptor.mime_type
            if self._needs_rewrite(descriptor):
                file_bytes, mime_type = self._rewrite(file_bytes, descriptor)
            payload = base64.b64encode(file_bytes).decode("ascii")

        logger.debug(
            "Encoded image for model request",
            extra_data={
                "file_name": file_name,
                "mime_type": mime_type,
                "encoded_length": len(payload),
                "encode_time_ms": timer.get_elapsed_ms(),
            },
        )
        return EncodedImage(mime_type=mime_type, data=payload)

    def _needs_rewrite(self, descriptor: ImageDescriptor) -> bool:
        if not descriptor.model_native:
            return True
        return self._too_large(descriptor.width, descriptor.height)

    def _too_large(self, width: int, height: int) -> bool:
        return self.max_dimension > 0 and max(width, height) > self.max_dimension

    def _rewrite(
        self, file_bytes: bytes, descriptor: ImageDescriptor
    ) -> tuple[bytes, str]:
        """Downscale and/or convert to a format the model accepts."""
        with Image.open(io.BytesIO(file_bytes)) as image:
            image.load()
            original_size = image.size
            if self._too_large(*image.size):
                image.thumbnail(
                    (self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS
                )

            mime_type = descriptor.mime_type
            target = _PIL_FORMATS.get(mime_type)
            if target is None or target == "GIF":
                target, mime_type = "PNG", "image/png"
            if target == "JPEG" and image.mode not in ("RGB", "L"):
                image = image.convert("RGB")

            buffer = io.BytesIO()
            image.save(buffer, format=target)

        logger.info(
            "Rewrote image before encoding",
            extra_data={
                "file_name": descriptor.file_name,
                "original_mime_type": descriptor.mime_type,
                "mime_type": mime_type,
                "original_dimensions": f"{original_size[0]}x{original_size[1]}",
                "dimensions": f"{image.size[0]}x{image.size[1]}",
            },
        )
        return buffer.getvalue(), mime_type
