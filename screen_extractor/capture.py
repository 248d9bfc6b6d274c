"""Interactive screen region capture through the platform screenshot tool."""

import shutil
import subprocess
import sys
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from screen_extractor.config import CaptureConfig
from screen_extractor.exceptions import CaptureError
from screen_extractor.logger import Timer, get_logger

logger = get_logger(__name__)

# Candidate region-capture commands per platform, tried in order
DEFAULT_COMMANDS = {
    "darwin": [["/usr/sbin/screencapture", "-i", "{path}"]],
    "linux": [
        ["gnome-screenshot", "-a", "-f", "{path}"],
        ["spectacle", "-r", "-b", "-n", "-o", "{path}"],
        ["maim", "-s", "{path}"],
    ],
}


def resolve_command(config: CaptureConfig, platform: str = sys.platform) -> list[str]:
    """Return the capture command template for this machine.

    Raises:
        CaptureError: If no capture utility is available
    """
    if config.command:
        return list(config.command)

    key = "linux" if platform.startswith("linux") else platform
    for candidate in DEFAULT_COMMANDS.get(key, []):
        if Path(candidate[0]).is_absolute() or shutil.which(candidate[0]):
            return candidate
    raise CaptureError(
        f"No screen capture utility found for platform {platform!r}; "
        "set SCREEN_EXTRACTOR_CAPTURE_COMMAND"
    )


class ScreenCapture:
    """Runs the interactive capture tool and hands back the image path."""

    def __init__(self, config: Optional[CaptureConfig] = None) -> None:
        self.config = config or CaptureConfig()

    def new_capture_path(self) -> Path:
        temp_dir = Path(self.config.temp_dir or tempfile.gettempdir())
        return temp_dir / f"screen-extractor-{uuid.uuid4().hex}.png"

    def capture(self) -> Optional[Path]:
        """Let the user select a region.

        Returns:
            Path of a non-empty image file, or None if the user cancelled

        Raises:
            CaptureError: If the capture utility cannot be started
        """
        path = self.new_capture_path()
        command = [part.replace("{path}", str(path)) for part in resolve_command(self.config)]

        logger.debug("Starting screen capture", extra_data={"command": command[0]})

        with Timer("capture") as timer:
            try:
                subprocess.run(command, check=True, capture_output=True)
            except FileNotFoundError as exc:
                raise CaptureError(f"Capture utility not found: {command[0]}") from exc
            except OSError as exc:
                raise CaptureError(f"Cannot run capture utility {command[0]}: {exc}") from exc
            except subprocess.CalledProcessError as exc:
                # Most tools exit non-zero when the selection is aborted
                logger.debug(
                    "Capture utility exited with an error",
                    extra_data={"returncode": exc.returncode},
                )

        if path.exists() and path.stat().st_size > 0:
            logger.info(
                "Screen region captured",
                extra_data={
                    "path": path,
                    "file_size_bytes": path.stat().st_size,
                    "capture_time_ms": timer.get_elapsed_ms(),
                },
            )
            return path

        logger.info("Screen capture cancelled")
        _remove(path)
        return None

    def cleanup(self, path: Optional[Path]) -> None:
        """Delete a capture file, ignoring any error."""
        if path is None or self.config.keep_file:
            return
        _remove(path)


def _remove(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except Exception:
        pass
