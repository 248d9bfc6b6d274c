"""Vision model client used by the router and the extractor."""

from typing import Any, Optional, Protocol

from openai import OpenAI

from screen_extractor.config import ExtractorConfig
from screen_extractor.logger import Timer, get_logger
from screen_extractor.models import EncodedImage

logger = get_logger(__name__)


class ModelClient(Protocol):
    """Anything that can send one system prompt, one user prompt and one
    image to a model and return the reply text."""

    def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        image: EncodedImage,
        max_output_tokens: int,
    ) -> str: ...


def build_input(system_prompt: str, user_prompt: str, image: EncodedImage) -> list[dict]:
    """Build the Responses API input list for one image request."""
    return [
        {
            "role": "system",
            "content": [{"type": "input_text", "text": system_prompt}],
        },
        {
            "role": "user",
            "content": [
                {"type": "input_text", "text": user_prompt},
                {"type": "input_image", "image_url": image.data_url},
            ],
        },
    ]


def response_text(response: Any) -> str:
    """Pull the reply text out of a Responses API response.

    Prefers the ``output_text`` convenience property and falls back to the
    first text part of the first output message.
    """
    text = getattr(response, "output_text", None)
    if text:
        return text
    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            part_text = getattr(part, "text", None)
            if part_text:
                return part_text
    return ""


class OpenAIModelClient:
    """``ModelClient`` backed by the OpenAI Responses API.

    Requests are deterministic (temperature 0) and never retried here;
    callers decide what a failure means.
    """

    def __init__(self, config: ExtractorConfig, client: Optional[OpenAI] = None) -> None:
        self.client = client or OpenAI(
            api_key=config.api_key,
            timeout=config.request_timeout,
            max_retries=0,
        )

    def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        image: EncodedImage,
        max_output_tokens: int,
    ) -> str:
        with Timer("model_request") as timer:
            response = self.client.responses.create(
                model=model,
                temperature=0,
                max_output_tokens=max_output_tokens,
                input=build_input(system_prompt, user_prompt, image),
            )
        text = response_text(response)

        logger.debug(
            "Model request completed",
            extra_data={
                "model": model,
                "response_chars": len(text),
                "request_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text
