import io

from PIL import Image

from screen_extractor.models import EncodedImage


class FakeModelClient:
    """Returns canned replies per model and records every call."""

    def __init__(self, replies=None, errors=None):
        self.replies = replies or {}
        self.errors = errors or {}
        self.calls = []

    def complete(self, model, system_prompt, user_prompt, image, max_output_tokens):
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "image": image,
                "max_output_tokens": max_output_tokens,
            }
        )
        if model in self.errors:
            raise self.errors[model]
        return self.replies.get(model, "")

    def calls_for(self, model):
        return [call for call in self.calls if call["model"] == model]


class FakeNotifier:
    def __init__(self):
        self.events = []

    def status(self, message):
        self.events.append(("status", message))

    def success(self, title, message=""):
        self.events.append(("success", title, message))

    def failure(self, title, message=""):
        self.events.append(("failure", title, message))


def make_image_bytes(size=(40, 20), fmt="PNG", color=(255, 255, 255)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def sample_image():
    return EncodedImage(mime_type="image/png", data="aGVsbG8=")
