"""User-visible status, success and failure signals."""

import shutil
import subprocess
import sys
from typing import Optional, TextIO

from screen_extractor.logger import get_logger

logger = get_logger(__name__)


def _osascript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class Notifier:
    """Reports run progress to the user.

    Messages always go to the log and to ``stream`` (stderr by default).
    On macOS, desktop notifications are posted as well when enabled.
    """

    def __init__(self, desktop: bool = True, stream: Optional[TextIO] = None) -> None:
        self.desktop = desktop and sys.platform == "darwin" and shutil.which("osascript") is not None
        self.stream = stream if stream is not None else sys.stderr

    def status(self, message: str) -> None:
        """Transient progress message."""
        logger.info(message)
        self._echo(message)

    def success(self, title: str, message: str = "") -> None:
        logger.info(title, extra_data={"message": message} if message else None)
        self._echo(f"{title}: {message}" if message else title)
        self._post(title, message)

    def failure(self, title: str, message: str = "") -> None:
        logger.error(title, extra_data={"message": message} if message else None)
        self._echo(f"{title}: {message}" if message else title)
        self._post(title, message)

    def _echo(self, line: str) -> None:
        print(line, file=self.stream)

    def _post(self, title: str, message: str) -> None:
        if not self.desktop:
            return
        script = (
            f"display notification {_osascript_quote(message)} "
            f"with title {_osascript_quote(title)}"
        )
        try:
            subprocess.run(["osascript", "-e", script], check=False, capture_output=True, timeout=5)
        except Exception:
            pass
