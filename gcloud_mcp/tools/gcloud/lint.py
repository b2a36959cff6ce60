"""Adapter for gcloud's own command linter.

``gcloud meta lint-gcloud-commands`` is the authority on whether a command
exists. It prints a JSON array with one entry per linted command string, e.g.::

    [{"command_string": "gcloud compute instances list --zone=a",
      "success": true,
      "command_string_no_args": "gcloud compute instances list",
      "error_message": null}]

The grammar is never reimplemented here; every call spawns gcloud.
"""

import json
import logging
from typing import Any

from ...schema import LintResult
from ..admission.commands import PROGRAM_NAME, normalize_command_path
from .cli import GcloudCli
from .errors import CliUnavailableError, MalformedLintOutputError, OracleUnavailableError

logger = logging.getLogger(__name__)

LINT_COMMAND = ["meta", "lint-gcloud-commands"]


class LintOracle:
    """Validates and canonicalizes command strings by asking gcloud."""

    def __init__(self, cli: GcloudCli) -> None:
        self.cli = cli

    def lint(self, command: str) -> LintResult:
        """Lints ``command`` (no program name) and strips its flags and positionals.

        Args:
            command: The invocation string, e.g. ``compute instances list --zone a``.

        Returns:
            A valid result with the canonical command path, or an invalid one
            carrying gcloud's diagnostic.

        Raises:
            OracleUnavailableError: gcloud could not be started.
            MalformedLintOutputError: gcloud exited cleanly without any entries.
        """
        try:
            result = self.cli.invoke(
                [*LINT_COMMAND, "--command-string", f"{PROGRAM_NAME} {command}"]
            )
        except CliUnavailableError as e:
            raise OracleUnavailableError(str(e)) from e

        if not result.ok:
            logger.info(f"Lint rejected '{command}' (exit {result.code})")
            return LintResult(
                valid=False,
                error=result.stderr.strip() or f"gcloud exited with code {result.code}",
                raw_output=result.stdout,
            )

        entry = _first_entry(result.stdout)
        if not entry.get("success", True):
            return LintResult(
                valid=False,
                error=str(entry.get("error_message") or "Invalid gcloud command."),
                raw_output=result.stdout,
            )

        command_no_args = entry.get("command_string_no_args")
        if not isinstance(command_no_args, str) or not command_no_args.strip():
            raise MalformedLintOutputError(
                f"Lint output for '{command}' has no command_string_no_args"
            )
        return LintResult(
            valid=True,
            command_path=normalize_command_path(command_no_args),
            raw_output=result.stdout,
        )


def _first_entry(stdout: str) -> dict[str, Any]:
    try:
        parsed = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise MalformedLintOutputError(f"Lint output is not JSON: {e}") from e
    if not isinstance(parsed, list) or not parsed or not isinstance(parsed[0], dict):
        raise MalformedLintOutputError("Lint output contained no entries")
    return parsed[0]
