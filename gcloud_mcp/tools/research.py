"""The research_gcloud_command tool: help text for a gcloud command."""

import logging

from ..schema import ToolResult
from .admission.commands import strip_program_name
from .admission.engine import AdmissionEngine
from .common import gcloud_tool, set_span_attribute
from .gcloud.cli import GcloudCli
from .gcloud.errors import GcloudError, OracleError

logger = logging.getLogger(__name__)

ARGUMENT_SEPARATOR = "--"

DESCRIPTION = """Returns the help documentation for a gcloud command.
Use this tool when you need to understand the usage, flags, and arguments of a specific gcloud command.
This tool mimics the output of 'gcloud help [args]' with markdown formatting."""

GLOBAL_FLAGS_HEADER = "GLOBAL FLAGS"
GLOBAL_FLAGS_LINES = 10


def extract_global_flags(help_output: str) -> str:
    """The lines following the GLOBAL FLAGS heading, header excluded."""
    lines = help_output.split("\n")
    for index, line in enumerate(lines):
        if GLOBAL_FLAGS_HEADER in line:
            return "\n".join(lines[index + 1 : index + 1 + GLOBAL_FLAGS_LINES])
    return ""


@gcloud_tool
def research_gcloud_command(
    engine: AdmissionEngine, cli: GcloudCli, args: list[str]
) -> ToolResult:
    """Returns help for ``args`` once admission control has cleared the command.

    The help flag is appended to the agent's own tokens, so the command is
    linted and checked against the access lists exactly like an execution.
    """
    args = strip_program_name(args)
    command = " ".join(args)

    # Everything after "--" goes to the wrapped program, help flag included.
    if ARGUMENT_SEPARATOR in args:
        logger.info(f"Refused research of '{command}': contains '{ARGUMENT_SEPARATOR}'")
        return ToolResult.success(
            f"Execution denied: '{ARGUMENT_SEPARATOR}' is not accepted when researching "
            "a command. Pass only the command groups, command and flags you need help for."
        )

    try:
        verdict = engine.evaluate(args)
    except OracleError as e:
        logger.error(f"Lint oracle failed for {args}: {e}")
        return ToolResult.error(f"Unable to verify the gcloud command: {e}")

    set_span_attribute("admission.decision", verdict.decision.value)
    if not verdict.allowed:
        return ToolResult.success(verdict.reason)

    try:
        help_result = cli.invoke([*args, "--document=style=markdown"])
        if not help_result.ok:
            return ToolResult.error(
                f"Failed to get help for command '{command}'.\nSTDERR:\n{help_result.stderr}"
            )

        global_flags = ""
        flags_result = cli.invoke(["help", "--format=markdown(global_flags)"])
        if flags_result.ok:
            global_flags = extract_global_flags(flags_result.stdout)
        else:
            logger.warning(
                f"Failed to get global flags help.\nSTDERR:\n{flags_result.stderr}"
            )
    except GcloudError as e:
        return ToolResult.error(str(e))

    return ToolResult.success(
        f"""
Please provide relevant context for the gcloud command and flags:
{command}.

Output of gcloud {command} --document=style=markdown:
{help_result.stdout}

Output of gcloud help --format="markdown(global_flags)", GLOBAL FLAGS section:
{global_flags}
"""
    )
