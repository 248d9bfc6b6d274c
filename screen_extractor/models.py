"""Data models for screen extractor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

AUTO_MODE = "auto"


class ExtractionMode(str, Enum):
    """Extraction strategy applied to a captured image."""

    TABLE = "table"
    CHART = "chart"
    DIAGRAM = "diagram"
    TEXT = "text"
    GENERAL = "general"

    @classmethod
    def from_value(cls, value: object) -> Optional["ExtractionMode"]:
        """Return the mode named by ``value``, or None if it is not a mode."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class EncodedImage:
    """Base64 image payload ready to embed in a model request."""

    mime_type: str
    data: str  # base64, no data-url prefix

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    @property
    def size_bytes(self) -> int:
        """Approximate decoded size of the payload."""
        return len(self.data) * 3 // 4


@dataclass
class RouterDecision:
    """Structured reply of the classification model.

    Only ``type`` drives mode selection. ``complexity`` is logged and
    otherwise ignored.
    """

    type: str
    complexity: Optional[str] = None
    format: Optional[str] = None
    priorities: list[str] = field(default_factory=list)


@dataclass
class ExtractionResult:
    """Result of one extraction run."""

    text: str  # Sanitized text, what ends up on the clipboard
    mode: ExtractionMode
    raw_text: str
    character_count: int
    truncated: bool = False
    routed: bool = False  # True when the mode came from the classification model


class RunStatus(str, Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class RunOutcome:
    """Outcome of an interactive capture run."""

    status: RunStatus
    result: Optional[ExtractionResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != RunStatus.FAILED
