import base64
import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from screen_extractor.detector import ImageDetector
from screen_extractor.encoder import ImageEncoder
from screen_extractor.exceptions import InvalidImageError, UnsupportedImageError
from tests.helpers import make_image_bytes


def decode(encoded):
    return Image.open(io.BytesIO(base64.b64decode(encoded.data)))


class ImageDetectorTests(unittest.TestCase):
    def test_sniffs_png_and_jpeg(self):
        detector = ImageDetector()
        png = detector.detect(make_image_bytes(fmt="PNG"), "capture.bin")
        self.assertEqual(png.mime_type, "image/png")
        self.assertEqual((png.width, png.height), (40, 20))
        jpeg = detector.detect(make_image_bytes(fmt="JPEG"), "capture.png")
        self.assertEqual(jpeg.mime_type, "image/jpeg")

    def test_rejects_non_images(self):
        with self.assertRaises(ValueError):
            ImageDetector().detect(b"%PDF-1.7 not an image", "doc.pdf")

    def test_rejects_corrupt_image(self):
        corrupt = make_image_bytes()[:24]
        with self.assertRaises(ValueError):
            ImageDetector().detect(corrupt, "capture.png")


class ImageEncoderTests(unittest.TestCase):
    def test_png_passes_through(self):
        raw = make_image_bytes()
        encoded = ImageEncoder().encode_bytes(raw, "capture.png")
        self.assertEqual(encoded.mime_type, "image/png")
        self.assertEqual(base64.b64decode(encoded.data), raw)
        self.assertTrue(encoded.data_url.startswith("data:image/png;base64,"))

    def test_large_image_is_downscaled(self):
        encoded = ImageEncoder(max_dimension=100).encode_bytes(
            make_image_bytes(size=(400, 200)), "capture.png"
        )
        self.assertEqual(decode(encoded).size, (100, 50))
        self.assertEqual(encoded.mime_type, "image/png")

    def test_downscale_disabled(self):
        encoded = ImageEncoder(max_dimension=0).encode_bytes(
            make_image_bytes(size=(400, 200)), "capture.png"
        )
        self.assertEqual(decode(encoded).size, (400, 200))

    def test_tiff_is_converted_to_png(self):
        encoded = ImageEncoder().encode_bytes(make_image_bytes(fmt="TIFF"), "capture.tiff")
        self.assertEqual(encoded.mime_type, "image/png")
        self.assertEqual(decode(encoded).format, "PNG")

    def test_empty_bytes(self):
        with self.assertRaises(InvalidImageError):
            ImageEncoder().encode_bytes(b"", "capture.png")

    def test_unsupported_bytes(self):
        with self.assertRaises(UnsupportedImageError):
            ImageEncoder().encode_bytes(b"plain text", "notes.txt")

    def test_encode_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "capture.png"
            path.write_bytes(make_image_bytes())
            encoded = ImageEncoder().encode_file(path)
        self.assertEqual(encoded.mime_type, "image/png")

    def test_missing_file(self):
        with self.assertRaises(InvalidImageError):
            ImageEncoder().encode_file(Path("/nonexistent/capture.png"))


if __name__ == "__main__":
    unittest.main()
