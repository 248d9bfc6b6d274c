"""Clipboard writer using the platform copy utility."""

import shutil
import subprocess
from typing import Optional

from screen_extractor.exceptions import ClipboardError
from screen_extractor.logger import get_logger

logger = get_logger(__name__)

# Tried in order; the first one found on PATH wins
CLIPBOARD_COMMANDS = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


def find_clipboard_command() -> Optional[list[str]]:
    for command in CLIPBOARD_COMMANDS:
        if shutil.which(command[0]):
            return list(command)
    return None


def copy_to_clipboard(text: str) -> None:
    """Place ``text`` on the system clipboard.

    Raises:
        ClipboardError: If no copy utility is available or it fails
    """
    command = find_clipboard_command()
    if command is None:
        raise ClipboardError(
            "No clipboard utility found (tried pbcopy, wl-copy, xclip, xsel, clip)"
        )

    try:
        subprocess.run(command, input=text.encode("utf-8"), check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ClipboardError(f"{command[0]} failed: {exc}") from exc

    logger.debug(
        "Copied text to clipboard",
        extra_data={"utility": command[0], "character_count": len(text)},
    )
