"""Allow/deny list matching over gcloud command paths.

Matching is prefix based on whole command groups: ``app`` matches
``app deploy`` but never ``apphub``. A GA entry also matches the same command
on every pre-release track, so denying ``compute ssh`` denies
``beta compute ssh`` as well.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import cached_property

from .commands import normalize_command_path, parse_release_track, without_release_track

Matcher = Callable[[str], bool]


def _is_prefix(entry: str, candidate: str) -> bool:
    return candidate == entry or candidate.startswith(entry + " ")


def normalize_entries(prefixes: Iterable[str]) -> tuple[str, ...]:
    """Normalizes and deduplicates list entries, keeping first-seen order."""
    seen: dict[str, None] = {}
    for prefix in prefixes:
        entry = normalize_command_path(prefix)
        if entry:
            seen.setdefault(entry, None)
    return tuple(seen)


def build_matcher(prefixes: Iterable[str]) -> Matcher:
    """Builds a membership test for a list of command path prefixes.

    Args:
        prefixes: Space or dot delimited prefixes, e.g. ``["compute instances list"]``.

    Returns:
        A pure function that reports whether a candidate command path is
        covered by any prefix. An empty list matches nothing.
    """
    entries = normalize_entries(prefixes)

    def matches(candidate: str) -> bool:
        path = normalize_command_path(candidate)
        if not path:
            return False
        ga_path = without_release_track(path)
        for entry in entries:
            if _is_prefix(entry, path):
                return True
            if not parse_release_track(entry) and _is_prefix(entry, ga_path):
                return True
        return False

    return matches


@dataclass(frozen=True)
class AccessControlList:
    """Immutable allow/deny configuration consulted by admission control.

    ``deny`` is the effective list (default entries merged with user entries).
    ``allow`` is empty when no allowlist was configured.
    """

    allow: tuple[str, ...] = ()
    deny: tuple[str, ...] = ()

    @classmethod
    def create(
        cls, allow: Iterable[str] = (), deny: Iterable[str] = ()
    ) -> "AccessControlList":
        return cls(allow=normalize_entries(allow), deny=normalize_entries(deny))

    @property
    def has_allowlist(self) -> bool:
        return bool(self.allow)

    @cached_property
    def _allow_matcher(self) -> Matcher:
        return build_matcher(self.allow)

    @cached_property
    def _deny_matcher(self) -> Matcher:
        return build_matcher(self.deny)

    def is_allowlisted(self, command_path: str) -> bool:
        return self._allow_matcher(command_path)

    def is_denied(self, command_path: str) -> bool:
        return self._deny_matcher(command_path)

    def permits(self, command_path: str) -> bool:
        """True if the path passes both the allowlist (when set) and the denylist."""
        if self.has_allowlist and not self.is_allowlisted(command_path):
            return False
        return not self.is_denied(command_path)
