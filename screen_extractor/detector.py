"""Image type detection and validation."""

import io
import mimetypes
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from screen_extractor.logger import get_logger

logger = get_logger(__name__)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"
GIF_SIGNATURES = (b"GIF87a", b"GIF89a")
TIFF_SIGNATURES = (b"II*\x00", b"MM\x00*")
BMP_SIGNATURE = b"BM"

# Formats the vision model accepts as-is
MODEL_NATIVE_TYPES = {"image/png", "image/jpeg", "image/webp", "image/gif"}

# Formats we can read and re-encode as PNG before sending
SUPPORTED_TYPES = MODEL_NATIVE_TYPES | {"image/tiff", "image/bmp"}


@dataclass
class ImageDescriptor:
    mime_type: str
    file_name: str
    width: int = 0
    height: int = 0

    @property
    def model_native(self) -> bool:
        return self.mime_type in MODEL_NATIVE_TYPES


class ImageDetector:
    """Detects image type and validates that it can be sent to the model."""

    def detect(self, file_bytes: bytes, file_name: str) -> ImageDescriptor:
        """Detect the image type of ``file_bytes``.

        Raises:
            ValueError: If the bytes are not a supported, decodable image
        """
        file_size = len(file_bytes)

        logger.debug(
            "Starting image type detection",
            extra_data={"file_name": file_name, "file_size_bytes": file_size},
        )

        mime_type = self._sniff_mime(file_bytes)
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(file_name)
            mime_type = guessed or "application/octet-stream"
            logger.debug(
                "Guessed MIME type from file extension",
                extra_data={"file_name": file_name, "guessed_mime_type": mime_type},
            )

        if mime_type not in SUPPORTED_TYPES:
            logger.warning(
                "Unsupported image type detected",
                extra_data={"file_name": file_name, "detected_mime_type": mime_type},
            )
            raise ValueError(f"Unsupported image type: {mime_type}")

        try:
            with Image.open(io.BytesIO(file_bytes)) as image:
                width, height = image.size
                image.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise ValueError(f"Cannot decode image {file_name}: {exc}") from exc

        logger.info(
            "Image type detected successfully",
            extra_data={
                "file_name": file_name,
                "mime_type": mime_type,
                "dimensions": f"{width}x{height}",
                "file_size_bytes": file_size,
            },
        )

        return ImageDescriptor(
            mime_type=mime_type,
            file_name=file_name,
            width=width,
            height=height,
        )

    @staticmethod
    def _sniff_mime(file_bytes: bytes) -> str | None:
        """Detect MIME type from file signature/magic bytes."""
        if file_bytes.startswith(PNG_SIGNATURE):
            return "image/png"
        if file_bytes.startswith(JPEG_SIGNATURE):
            return "image/jpeg"
        if file_bytes[:4] == b"RIFF" and file_bytes[8:12] == b"WEBP":
            return "image/webp"
        if file_bytes.startswith(GIF_SIGNATURES):
            return "image/gif"
        if file_bytes.startswith(TIFF_SIGNATURES):
            return "image/tiff"
        if file_bytes.startswith(BMP_SIGNATURE):
            return "image/bmp"
        return None
