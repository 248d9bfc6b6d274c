"""Extraction mode routing.

Picks one ``ExtractionMode`` per image, either from the configured override
or from a cheap classification request. Routing is advisory: every failure
degrades to ``ExtractionMode.GENERAL`` and nothing is raised.
"""

import json
import re
from typing import Any, Optional

from screen_extractor.client import ModelClient
from screen_extractor.config import ExtractorConfig
from screen_extractor.logger import Timer, get_logger
from screen_extractor.models import EncodedImage, ExtractionMode, RouterDecision

logger = get_logger(__name__)

ROUTER_SYSTEM_PROMPT = (
    "You are a routing function. Return ONLY valid minified JSON. No prose."
)

ROUTER_USER_PROMPT = (
    "Classify this clipboard image into one pipeline: "
    + ", ".join(mode.value for mode in ExtractionMode)
    + ". Choose the one that maximizes extraction accuracy. "
    "Use text for screenshots that are mostly prose, code or UI. "
    "Return JSON with keys: type, complexity (simple|moderate|complex), "
    "format, priorities (array of strings)."
)

ROUTER_MAX_OUTPUT_TOKENS = 200

FALLBACK_MODE = ExtractionMode.GENERAL

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def _decision_from_obj(obj: Any) -> Optional[RouterDecision]:
    if not isinstance(obj, dict):
        return None
    mode_type = obj.get("type")
    if not isinstance(mode_type, str):
        return None

    priorities = obj.get("priorities") or []
    if not isinstance(priorities, list):
        priorities = [priorities]

    complexity = obj.get("complexity")
    fmt = obj.get("format")
    return RouterDecision(
        type=mode_type,
        complexity=str(complexity) if complexity is not None else None,
        format=str(fmt) if fmt is not None else None,
        priorities=[str(p) for p in priorities],
    )


def parse_router_reply(text: str) -> Optional[RouterDecision]:
    """Parse a classification reply into a ``RouterDecision``.

    Tries the whole reply as JSON first, then the first ``{...}`` span in it.
    Returns None when neither parses to an object with a string ``type``.
    """
    text = text or ""
    try:
        return _decision_from_obj(json.loads(text))
    except ValueError:
        pass

    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        return None
    try:
        return _decision_from_obj(json.loads(match.group(0)))
    except ValueError:
        return None


def resolve_mode(decision: Optional[RouterDecision]) -> ExtractionMode:
    """Validate a decision against the mode enumeration."""
    if decision is None:
        return FALLBACK_MODE
    return ExtractionMode.from_value(decision.type) or FALLBACK_MODE


class ModeRouter:
    """Decides which extraction mode applies to an image."""

    def __init__(self, client: ModelClient) -> None:
        self.client = client

    def decide(self, image: EncodedImage, config: ExtractorConfig) -> ExtractionMode:
        forced = config.forced_mode
        if forced is not None:
            logger.debug("Using forced extraction mode", extra_data={"mode": forced.value})
            return forced

        with Timer("routing") as timer:
            try:
                text = self.client.complete(
                    model=config.router_model,
                    system_prompt=ROUTER_SYSTEM_PROMPT,
                    user_prompt=ROUTER_USER_PROMPT,
                    image=image,
                    max_output_tokens=ROUTER_MAX_OUTPUT_TOKENS,
                )
            except Exception as exc:
                logger.warning(
                    "Router request failed, falling back to general mode",
                    extra_data={
                        "model": config.router_model,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                    exc_info=config.debug_logging,
                )
                return FALLBACK_MODE

        decision = parse_router_reply(text)
        mode = resolve_mode(decision)

        if config.debug_logging:
            logger.debug("Router raw reply", extra_data={"reply": repr(text)})
        logger.info(
            "Router selected extraction mode",
            extra_data={
                "mode": mode.value,
                "parsed": decision is not None,
                "declared_type": decision.type if decision else None,
                "complexity": decision.complexity if decision else None,
                "routing_time_ms": timer.get_elapsed_ms(),
            },
        )
        return mode
