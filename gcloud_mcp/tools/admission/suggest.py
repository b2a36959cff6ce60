"""Release-track fallback search for denied pre-release commands.

When ``beta compute instances list`` is denied, the GA (or beta, when starting
from alpha) variant may well be permitted. Candidates are only ever linted,
never executed.
"""

import logging

from ..gcloud.lint import LintOracle
from .commands import parse_release_track, swap_release_track, to_command_string
from .matcher import AccessControlList

logger = logging.getLogger(__name__)

# GA is always tried before beta.
_FALLBACK_TRACKS = {
    "alpha": ("", "beta"),
    "beta": ("",),
}


def find_alternative_command(
    args: list[str],
    command_path: str,
    acl: AccessControlList,
    oracle: LintOracle,
) -> str | None:
    """Searches other release tracks for a permitted equivalent of a denied command.

    Args:
        args: The original invocation tokens, without program name.
        command_path: The canonical (linted) command path of ``args``.
        acl: Access lists the alternative must satisfy.
        oracle: Lint oracle used to confirm the alternative exists.

    Returns:
        The full alternative invocation string, flags and positionals
        included, or None if no tier yields a working permitted command.
    """
    track = parse_release_track(command_path)
    for target in _FALLBACK_TRACKS.get(track, ()):
        candidate_args = swap_release_track(args, track, target)
        candidate = to_command_string(candidate_args)
        result = oracle.lint(candidate)
        if not result.valid or result.command_path is None:
            logger.debug(f"Alternative '{candidate}' does not lint: {result.error}")
            continue
        if not acl.permits(result.command_path):
            logger.debug(f"Alternative '{candidate}' is not permitted")
            continue
        logger.info(f"Suggesting '{candidate}' in place of '{command_path}'")
        return candidate
    return None
