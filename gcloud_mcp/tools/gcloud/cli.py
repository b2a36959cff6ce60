"""Process wrapper around the gcloud executable.

A ``GcloudCli`` instance is constructed once at start-up and handed to every
component that needs to spawn gcloud, instead of being reached through a
module-level singleton.
"""

import logging
import shutil
import subprocess

from ...schema import CliResult
from .errors import CliUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "gcloud"


class GcloudCli:
    """Runs gcloud commands and captures their output."""

    def __init__(self, executable: str = DEFAULT_EXECUTABLE) -> None:
        self.executable = executable

    def invoke(self, args: list[str]) -> CliResult:
        """Runs ``gcloud <args>`` to completion.

        Every exit code is returned to the caller; only a failure to start the
        process raises.

        Args:
            args: Arguments passed verbatim, never through a shell.

        Returns:
            The exit code and captured streams.

        Raises:
            CliUnavailableError: If the executable cannot be started.
        """
        cmd = [self.executable, *args]
        logger.debug(f"Spawning: {cmd}")
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CliUnavailableError(
                f"Unable to start '{self.executable}': {e}"
            ) from e

        if proc.returncode != 0:
            logger.debug(f"'{self.executable}' exited with {proc.returncode}")
        return CliResult(code=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    def is_available(self) -> bool:
        """Returns True if gcloud is on PATH and answers ``gcloud version``."""
        if shutil.which(self.executable) is None:
            return False
        try:
            return self.invoke(["version"]).ok
        except CliUnavailableError:
            return False
