"""Command normalization and release-track helpers."""

import re

PROGRAM_NAME = "gcloud"

RELEASE_TRACKS = ("alpha", "beta", "preview")

_PATH_SEPARATOR = re.compile(r"[\s.]+")


def strip_program_name(args: list[str]) -> list[str]:
    """Drops a leading ``gcloud`` token, if present."""
    if args and args[0] == PROGRAM_NAME:
        return list(args[1:])
    return list(args)


def to_command_string(args: list[str]) -> str:
    """Joins an invocation into the string used for lint and display.

    Flags and positionals are kept; telling them apart is the lint oracle's job.
    """
    return " ".join(strip_program_name(args))


def normalize_command_path(path: str) -> str:
    """Canonical form of a command path or access list entry.

    Accepts space or dot delimited paths (``compute.instances.list``), drops
    the program name and lowercases. Applying it twice changes nothing.
    """
    tokens = [t for t in _PATH_SEPARATOR.split(path.strip().lower()) if t]
    return " ".join(strip_program_name(tokens))


def parse_release_track(command_path: str) -> str:
    """Returns ``alpha``/``beta``/``preview``, or ``""`` for GA commands."""
    first, _, _ = command_path.partition(" ")
    return first if first in RELEASE_TRACKS else ""


def without_release_track(command_path: str) -> str:
    """The GA form of a command path."""
    if parse_release_track(command_path):
        return command_path.partition(" ")[2]
    return command_path


def _release_track_index(args: list[str], track: str) -> int | None:
    """Position of the release track token in an invocation.

    A token directly after a bare ``--flag`` is probably that flag's value
    (``--project alpha``), so such occurrences are skipped while a better one
    exists.
    """
    positions = [i for i, token in enumerate(args) if token == track]
    if not positions:
        return None
    for i in positions:
        previous = args[i - 1] if i else ""
        if not (previous.startswith("-") and "=" not in previous):
            return i
    return positions[0]


def swap_release_track(args: list[str], current: str, target: str) -> list[str]:
    """Rewrites the release track token in a full invocation.

    Flags and positionals are preserved in place. An empty ``target`` removes
    the track, producing the GA invocation.

    Args:
        args: Invocation tokens, without program name.
        current: The track present in ``args``.
        target: The track to switch to, or ``""`` for GA.
    """
    swapped = list(args)
    index = _release_track_index(swapped, current)
    if index is None:
        return swapped
    if target:
        swapped[index] = target
    else:
        del swapped[index]
    return swapped
