"""
Host reload hook.

After a profile is applied the host has to re-read its configuration key.
The command is whatever the host needs (restart a service, signal a process,
touch a watched file) and comes from the [host] config section.
"""

import subprocess
from typing import Tuple

from .log import get_logger

logger = get_logger(__name__)


class HostReloader:
    """Runs the configured reload command. Never retries."""

    def __init__(self, command: str = "", timeout: int = 30):
        self.command = command.strip()
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.command)

    def reload(self) -> Tuple[bool, str]:
        """
        Run the reload command.

        Returns:
            (success, detail) where detail is empty on success
        """
        if not self.enabled:
            return False, "no reload command configured"

        logger.info("Reloading host: %s", self.command)
        try:
            result = subprocess.run(
                self.command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return False, f"reload command timed out after {self.timeout}s"
        except OSError as e:
            return False, str(e)

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            logger.warning("Reload command failed: %s", detail)
            return False, detail

        return True, ""
