"""
Clipboard export through whichever system tool is installed.
"""

import shutil
import subprocess
from typing import List, Optional

from ..log import get_logger

logger = get_logger(__name__)

# Tried in order; the first one found on PATH is used
CLIPBOARD_COMMANDS: List[List[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


def find_clipboard_command() -> Optional[List[str]]:
    """Return the first available clipboard command, or None."""
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_to_clipboard(text: str, timeout: int = 5) -> bool:
    """
    Copy text to the system clipboard.

    Returns False when no tool is available or the tool fails; the caller
    falls back to showing the text for manual copy.
    """
    cmd = find_clipboard_command()
    if cmd is None:
        logger.debug("No clipboard tool found")
        return False

    try:
        result = subprocess.run(
            cmd,
            input=text,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out", cmd[0])
        return False
    except OSError as e:
        logger.debug("%s failed: %s", cmd[0], e)
        return False

    return result.returncode == 0
