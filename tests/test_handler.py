import tempfile
import unittest
from pathlib import Path
from unittest import mock

from screen_extractor.api import extract_image
from screen_extractor.capture import ScreenCapture
from screen_extractor.config import CaptureConfig, ExtractorConfig
from screen_extractor.exceptions import CaptureError, InvalidImageError
from screen_extractor.handler import ExtractionHandler
from screen_extractor.models import ExtractionMode, RunStatus
from tests.helpers import FakeModelClient, FakeNotifier, make_image_bytes

ROUTER_MODEL = "router-model"
EXTRACT_MODEL = "extract-model"


class FakeCapture:
    def __init__(self, path=None, error=None):
        self.path = path
        self.error = error
        self.cleaned = []

    def capture(self):
        if self.error:
            raise self.error
        return self.path

    def cleanup(self, path):
        self.cleaned.append(path)


class ExtractionHandlerTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.image_path = Path(self.tmp.name) / "capture.png"
        self.image_path.write_bytes(make_image_bytes())
        self.copied = []
        self.notifier = FakeNotifier()

    def tearDown(self):
        self.tmp.cleanup()

    def make_handler(self, client, capture=None, **config_kwargs):
        config = ExtractorConfig(
            router_model=ROUTER_MODEL, extract_model=EXTRACT_MODEL, **config_kwargs
        )
        return ExtractionHandler(
            config,
            client=client,
            capture=capture or FakeCapture(self.image_path),
            notifier=self.notifier,
            clipboard=self.copied.append,
        )

    def test_forced_table_end_to_end(self):
        client = FakeModelClient(replies={EXTRACT_MODEL: "A\tB\n1\t2"})
        capture = FakeCapture(self.image_path)
        handler = self.make_handler(client, capture, force_mode="table")

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.SUCCESS)
        self.assertEqual(outcome.result.text, "A\tB\n1\t2")
        self.assertEqual(outcome.result.mode, ExtractionMode.TABLE)
        self.assertFalse(outcome.result.routed)
        self.assertEqual(self.copied, ["A\tB\n1\t2"])
        self.assertEqual(client.calls_for(ROUTER_MODEL), [])
        self.assertEqual(len(client.calls_for(EXTRACT_MODEL)), 1)
        self.assertIn(("success", "Copied extracted text", "Mode: table"), self.notifier.events)
        self.assertEqual(capture.cleaned, [self.image_path])

    def test_auto_with_unparsable_router_reply(self):
        client = FakeModelClient(
            replies={ROUTER_MODEL: "not json", EXTRACT_MODEL: "Dashboard\nVisible text: Revenue"}
        )
        handler = self.make_handler(client, include_confidence=True)

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.SUCCESS)
        self.assertEqual(outcome.result.mode, ExtractionMode.GENERAL)
        self.assertTrue(outcome.result.routed)
        self.assertEqual(outcome.result.text.splitlines()[-1], "Confidence: medium")
        self.assertTrue(outcome.result.text.startswith("Dashboard\nVisible text: Revenue"))
        self.assertIn("Mode: GENERAL", client.calls_for(EXTRACT_MODEL)[0]["user_prompt"])

    def test_cancelled_capture(self):
        client = FakeModelClient()
        handler = self.make_handler(client, FakeCapture(None))

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.CANCELLED)
        self.assertTrue(outcome.ok)
        self.assertEqual(client.calls, [])
        self.assertEqual(self.copied, [])
        self.assertIn(("status", "Screenshot cancelled"), self.notifier.events)

    def test_capture_tool_missing_is_reported_as_cancelled(self):
        client = FakeModelClient()
        handler = self.make_handler(client, FakeCapture(error=CaptureError("no tool")))

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.CANCELLED)
        self.assertEqual(outcome.error, "no tool")
        self.assertEqual(client.calls, [])

    def test_unrunnable_capture_tool_is_reported_as_cancelled(self):
        client = FakeModelClient()
        capture = ScreenCapture(
            CaptureConfig(command=["fake-capture", "{path}"], temp_dir=self.tmp.name)
        )
        handler = self.make_handler(client, capture)

        with mock.patch("subprocess.run", side_effect=PermissionError("denied")):
            outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.CANCELLED)
        self.assertIn("denied", outcome.error)
        self.assertEqual(client.calls, [])
        self.assertEqual(self.copied, [])

    def test_extraction_failure(self):
        client = FakeModelClient(
            replies={ROUTER_MODEL: '{"type":"chart"}'},
            errors={EXTRACT_MODEL: RuntimeError("insufficient_quota")},
        )
        capture = FakeCapture(self.image_path)
        handler = self.make_handler(client, capture)

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.FAILED)
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.error, "insufficient_quota")
        self.assertEqual(self.copied, [])
        self.assertIn(("failure", "Extraction failed", "insufficient_quota"), self.notifier.events)
        self.assertEqual(capture.cleaned, [self.image_path])

    def test_clipboard_failure_is_reported(self):
        client = FakeModelClient(replies={EXTRACT_MODEL: "text"})
        handler = self.make_handler(client, force_mode="text")
        handler.clipboard = mock.Mock(side_effect=OSError("no display"))

        outcome = handler.run()

        self.assertEqual(outcome.status, RunStatus.FAILED)
        self.assertEqual(outcome.error, "no display")

    def test_output_is_truncated_to_budget(self):
        client = FakeModelClient(replies={EXTRACT_MODEL: "x" * 50})
        handler = self.make_handler(client, force_mode="text", max_output_chars=10)

        result = handler.process_file(self.image_path)

        self.assertTrue(result.truncated)
        self.assertEqual(result.text, "x" * 10 + "\n[truncated]")
        self.assertEqual(result.raw_text, "x" * 50)


class ExtractImageTests(unittest.TestCase):
    def test_from_bytes(self):
        client = FakeModelClient(replies={EXTRACT_MODEL: "This image shows: A -> B"})
        config = ExtractorConfig(extract_model=EXTRACT_MODEL, force_mode="diagram")

        result = extract_image(
            file_bytes=make_image_bytes(), file_name="flow.png", config=config, client=client
        )

        self.assertEqual(result.text, "A -> B")
        self.assertEqual(result.mode, ExtractionMode.DIAGRAM)

    def test_argument_validation(self):
        config = ExtractorConfig()
        with self.assertRaises(ValueError):
            extract_image(config=config)
        with self.assertRaises(ValueError):
            extract_image(file_path="a.png", file_bytes=b"x", config=config)
        with self.assertRaises(ValueError):
            extract_image(file_bytes=b"x", config=config)

    def test_missing_file(self):
        with self.assertRaises(InvalidImageError):
            extract_image(file_path="/nonexistent/a.png", config=ExtractorConfig(), client=FakeModelClient())


if __name__ == "__main__":
    unittest.main()
