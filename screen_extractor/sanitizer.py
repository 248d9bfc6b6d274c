"""Post-processing of extraction model output."""

import re
from dataclasses import dataclass

TRUNCATION_MARKER = "[truncated]"
DEFAULT_CONFIDENCE_LINE = "Confidence: medium"

LEAD_IN_RE = re.compile(
    r"^(?:this|the)\s+(?:image|screenshot|picture)\s+(?:shows|is|contains|depicts)\b\s*[:-]?\s*",
    re.IGNORECASE,
)
CONFIDENCE_LINE_RE = re.compile(r"^\s*confidence:\s*(?:high|medium|low)\s*$", re.IGNORECASE)


@dataclass
class SanitizedOutput:
    text: str
    truncated: bool = False


def strip_lead_in(text: str) -> str:
    """Remove one leading "This image shows:"-style phrase, if present."""
    return LEAD_IN_RE.sub("", text, count=1)


def has_confidence_line(text: str) -> bool:
    """True when the last line of ``text`` is a compliant confidence line."""
    lines = text.rstrip().splitlines()
    return bool(lines) and CONFIDENCE_LINE_RE.match(lines[-1]) is not None


def sanitize(text: str, max_chars: int, include_confidence: bool = False) -> SanitizedOutput:
    """Strip lead-in boilerplate, ensure a confidence line, enforce the budget.

    Never raises; any string (or None) is accepted.
    """
    out = strip_lead_in((text or "").strip())

    if include_confidence and not has_confidence_line(out):
        out = f"{out}\n{DEFAULT_CONFIDENCE_LINE}"

    truncated = len(out) > max_chars
    if truncated:
        # Hard cut; not sentence aware
        out = f"{out[:max_chars]}\n{TRUNCATION_MARKER}"

    return SanitizedOutput(text=out.strip(), truncated=truncated)


def sanitize_output(text: str, max_chars: int, include_confidence: bool = False) -> str:
    return sanitize(text, max_chars, include_confidence).text
