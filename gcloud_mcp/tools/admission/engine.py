"""Admission control for gcloud invocations.

Every command requested by the agent passes through::

    normalize -> lint -> allowlist check -> denylist check -> verdict

Denylist hits on pre-release commands additionally run a release-track
fallback search so the agent gets an actionable alternative.
"""

import logging
from collections.abc import Sequence

from ...config import DEFAULT_DENYLIST, AccessConfig
from ...schema import Decision, DenialKind, Verdict
from ..gcloud.lint import LintOracle
from .commands import PROGRAM_NAME, strip_program_name, to_command_string
from .matcher import AccessControlList
from .suggest import find_alternative_command

logger = logging.getLogger(__name__)

DEBUG_CONFIG_ARGS = ("gcloud-mcp", "debug", "config")

_USER_CONFIG_HINT = (
    "To get the user-specified {list_type} list, invoke this tool again with "
    '["gcloud-mcp", "debug", "config"]'
)


class AdmissionEngine:
    """Decides whether a gcloud invocation may run.

    Args:
        config: User allow/deny configuration, loaded once at start-up.
        oracle: Lint oracle used to validate and canonicalize commands.
        default_deny: Entries denied regardless of user configuration.
    """

    def __init__(
        self,
        config: AccessConfig,
        oracle: LintOracle,
        default_deny: Sequence[str] = DEFAULT_DENYLIST,
    ) -> None:
        self.config = config
        self.oracle = oracle
        self.default_deny = tuple(default_deny)
        self.acl = AccessControlList.create(
            allow=config.allow, deny=[*self.default_deny, *config.deny]
        )

    @staticmethod
    def is_debug_request(args: Sequence[str]) -> bool:
        return " ".join(args) == " ".join(DEBUG_CONFIG_ARGS)

    def describe_config(self) -> str:
        """User-configured restrictions as plain text, entries verbatim."""
        if self.config.allow:
            lines = ["# The user has the following commands allowlisted:"]
            lines += [f"- {c}" for c in self.config.allow]
        else:
            lines = ["# The user has the following commands denylisted:"]
            lines += [f"- {c}" for c in self.config.deny]
        return "\n".join(lines)

    def evaluate(self, args: list[str]) -> Verdict:
        """Runs admission control for one invocation.

        Args:
            args: Invocation tokens; a leading ``gcloud`` is tolerated.

        Returns:
            The verdict. Policy outcomes never raise.

        Raises:
            OracleError: The lint oracle itself failed.
        """
        args = strip_program_name(args)
        command = to_command_string(args)
        if not command.strip():
            return Verdict(
                decision=Decision.DENIED,
                kind=DenialKind.SYNTAX_INVALID,
                reason=self._syntax_message(command, "No command was given."),
            )

        lint = self.oracle.lint(command)
        if not lint.valid or lint.command_path is None:
            logger.info(f"Denied '{command}': does not lint")
            return Verdict(
                decision=Decision.DENIED,
                kind=DenialKind.SYNTAX_INVALID,
                reason=self._syntax_message(command, lint.error or ""),
            )
        path = lint.command_path

        if self.acl.has_allowlist and not self.acl.is_allowlisted(path):
            logger.info(f"Denied '{path}': not on allowlist")
            return Verdict(
                decision=Decision.DENIED,
                kind=DenialKind.ALLOWLIST_MISS,
                command_path=path,
                reason=self._allowlist_message(),
            )

        if self.acl.is_denied(path):
            alternative = find_alternative_command(args, path, self.acl, self.oracle)
            if alternative is not None:
                return Verdict(
                    decision=Decision.DENIED_WITH_SUGGESTION,
                    kind=DenialKind.DENYLIST_HIT,
                    command_path=path,
                    suggested_alternative=alternative,
                    reason=self._suggestion_message(command, alternative),
                )
            logger.info(f"Denied '{path}': on denylist")
            return Verdict(
                decision=Decision.DENIED,
                kind=DenialKind.DENYLIST_HIT,
                command_path=path,
                reason=self._denylist_message(),
            )

        return Verdict(
            decision=Decision.ALLOWED,
            command_path=path,
            reason=f"'{path}' is permitted.",
        )

    def _syntax_message(self, command: str, diagnostic: str) -> str:
        return f"""Execution denied: '{PROGRAM_NAME} {command}' is not a valid gcloud command.
{diagnostic}

Do not retry this exact command - it will always fail. Research the correct command syntax (for example with the research_gcloud_command tool) and try again."""

    def _allowlist_message(self) -> str:
        message = (
            "Execution denied: This command is not on the allow list. Do not attempt to "
            "run this command again - it will always fail. Instead, proceed a different "
            "way or ask the user for clarification.\n"
        )
        message += _USER_CONFIG_HINT.format(list_type="allow")
        message += """

## Allowlist Behavior:
- An allow list can be provided in the configuration file.
- A configuration file cannot contain both an allow list and a custom deny list."""
        return message

    def _denylist_message(self) -> str:
        message = (
            "Execution denied: This command is on the deny list. Do not attempt to run "
            "this command again - it will always fail. Instead, proceed a different way "
            "or ask the user for clarification."
        )
        if self.config.deny:
            message += "\n" + _USER_CONFIG_HINT.format(list_type="deny")
        defaults = "\n".join(f"-  '{c}'" for c in self.default_deny)
        message += f"""

## Denylist Behavior:
- A default deny list is ALWAYS active, blocking potentially interactive or sensitive commands.
- A custom deny list can be provided via a configuration file, which is then merged with the default list.
- Matching is done by prefix. The input command is normalized to ensure only full command groups are matched (e.g., `app` matches `app deploy` but not `apphub`).
- If a GA (General Availability) command is on the denylist, all of its release tracks (e.g., alpha, beta) are denied as well.

### Default Denied Commands:
The following commands are always denied:
{defaults}"""
        return message

    def _suggestion_message(self, command: str, alternative: str) -> str:
        return f"""Execution denied: The command '{PROGRAM_NAME} {command}' is on the deny list.
However, a similar command is available: '{PROGRAM_NAME} {alternative}'.
Invoke this tool again with this alternative command to fix the issue."""
