"""Configuration classes for screen extractor."""

import os
import shlex
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from screen_extractor.exceptions import ConfigurationError
from screen_extractor.models import AUTO_MODE, ExtractionMode

DEFAULT_MAX_OUTPUT_CHARS = 12000

ENV_PREFIX = "SCREEN_EXTRACTOR_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def parse_max_chars(raw: Optional[str]) -> int:
    """Parse a character budget, falling back to the default on bad input."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_MAX_OUTPUT_CHARS
    return value if value > 0 else DEFAULT_MAX_OUTPUT_CHARS


def validate_force_mode(value: str) -> str:
    """Normalize a forced mode value ("auto" or one extraction mode).

    Raises:
        ConfigurationError: If the value is neither "auto" nor a known mode
    """
    normalized = (value or AUTO_MODE).strip().lower()
    if normalized == AUTO_MODE:
        return AUTO_MODE
    mode = ExtractionMode.from_value(normalized)
    if mode is None:
        allowed = ", ".join([AUTO_MODE] + [m.value for m in ExtractionMode])
        raise ConfigurationError(
            f"Unknown force mode {value!r}; expected one of: {allowed}"
        )
    return mode.value


@dataclass
class CaptureConfig:
    """Configuration for the interactive screen capture step."""

    command: Optional[list[str]] = None
    """Explicit capture command. ``{path}`` is replaced by the output file.
    If None, a platform default is chosen (screencapture on macOS,
    gnome-screenshot, spectacle or maim on Linux)."""

    temp_dir: Optional[str] = None
    """Directory for temporary capture files. If None, uses the system temp dir."""

    keep_file: bool = False
    """Keep the capture file after the run instead of deleting it."""

    notifications: bool = True
    """Post desktop notifications (macOS only) in addition to stderr messages."""


@dataclass
class ExtractorConfig:
    """Configuration for a capture-and-extract run.

    One value is built per process and passed into every component.

    Examples:
        >>> # Let the router pick the mode
        >>> config = ExtractorConfig(api_key="sk-...")

        >>> # Always extract tables, with a confidence line
        >>> config = ExtractorConfig(api_key="sk-...", force_mode="table",
        ...                          include_confidence=True)
    """

    api_key: Optional[str] = None
    """OpenAI API key. If None, the openai client reads OPENAI_API_KEY itself."""

    router_model: str = "gpt-4o-mini"
    """Model used for the lightweight classification request."""

    extract_model: str = "gpt-4o"
    """Vision model used for the extraction request."""

    max_output_chars: int = DEFAULT_MAX_OUTPUT_CHARS
    """Character budget for the final text. Longer output is hard-truncated."""

    include_confidence: bool = False
    """Ask for, and guarantee, a trailing ``Confidence: high|medium|low`` line."""

    force_mode: str = AUTO_MODE
    """``auto`` to classify each image, or one fixed extraction mode."""

    debug_logging: bool = False
    """Log at DEBUG level, including raw router replies."""

    request_timeout: float = 60.0
    """Timeout in seconds for each model request."""

    max_image_dimension: int = 2048
    """Longest image side sent to the model. Larger captures are downscaled.

    - 0: Disable downscaling (send the capture as-is)
    - 2048: Default, keeps dense tables legible
    """

    capture: CaptureConfig = field(default_factory=CaptureConfig)

    def __post_init__(self):
        self.force_mode = validate_force_mode(self.force_mode)
        if self.max_output_chars <= 0:
            raise ConfigurationError("max_output_chars must be positive")

    @property
    def forced_mode(self) -> Optional[ExtractionMode]:
        """The forced extraction mode, or None when routing is automatic."""
        if self.force_mode == AUTO_MODE:
            return None
        return ExtractionMode(self.force_mode)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ExtractorConfig":
        """Create config from environment variables.

        A ``.env`` file is loaded first (``env_file`` or the nearest one found
        from the working directory); variables already set in the process
        environment win.

        Env vars:
            OPENAI_API_KEY
            SCREEN_EXTRACTOR_ROUTER_MODEL, SCREEN_EXTRACTOR_EXTRACT_MODEL
            SCREEN_EXTRACTOR_MAX_OUTPUT_CHARS (default: 12000)
            SCREEN_EXTRACTOR_INCLUDE_CONFIDENCE (default: false)
            SCREEN_EXTRACTOR_FORCE_MODE (default: auto)
            SCREEN_EXTRACTOR_DEBUG (default: false)
            SCREEN_EXTRACTOR_TIMEOUT (seconds, default: 60)
            SCREEN_EXTRACTOR_MAX_IMAGE_DIMENSION (default: 2048)
            SCREEN_EXTRACTOR_CAPTURE_COMMAND (e.g. "flameshot gui -p {path}")
            SCREEN_EXTRACTOR_KEEP_CAPTURE (default: false)
            SCREEN_EXTRACTOR_NOTIFICATIONS (default: true)
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        def env(name: str, default: Optional[str] = None) -> Optional[str]:
            return os.environ.get(ENV_PREFIX + name, default)

        defaults = cls()
        command = env("CAPTURE_COMMAND")

        try:
            timeout = float(env("TIMEOUT", str(defaults.request_timeout)))
            max_dim = int(env("MAX_IMAGE_DIMENSION", str(defaults.max_image_dimension)))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            api_key=os.environ.get("OPENAI_API_KEY") or None,
            router_model=env("ROUTER_MODEL", defaults.router_model),
            extract_model=env("EXTRACT_MODEL", defaults.extract_model),
            max_output_chars=parse_max_chars(env("MAX_OUTPUT_CHARS")),
            include_confidence=_parse_bool(
                "INCLUDE_CONFIDENCE", env("INCLUDE_CONFIDENCE", "false")
            ),
            force_mode=env("FORCE_MODE", AUTO_MODE),
            debug_logging=_parse_bool("DEBUG", env("DEBUG", "false")),
            request_timeout=timeout,
            max_image_dimension=max_dim,
            capture=CaptureConfig(
                command=shlex.split(command) if command else None,
                keep_file=_parse_bool("KEEP_CAPTURE", env("KEEP_CAPTURE", "false")),
                notifications=_parse_bool(
                    "NOTIFICATIONS", env("NOTIFICATIONS", "true")
                ),
            ),
        )
