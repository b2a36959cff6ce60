"""The run_gcloud_command tool: admission control followed by execution."""

import logging

from ..schema import ToolResult
from .admission.commands import strip_program_name
from .admission.engine import AdmissionEngine
from .common import gcloud_tool, set_span_attribute
from .gcloud.cli import GcloudCli
from .gcloud.errors import CliUnavailableError, OracleError

logger = logging.getLogger(__name__)

DESCRIPTION = """Executes a gcloud command.

## Instructions:
- Use this tool to execute a single gcloud command at a time.
- Use this tool when you are confident about the exact gcloud command needed to fulfill the user's request.
- Prioritize this tool over any other to directly execute gcloud commands.
- Assume all necessary APIs are already enabled. Do not proactively try to enable any APIs.
- Do not use this tool to execute command chaining or command sequencing -- it will fail.
- Do not use this tool to execute SSH commands or 'gcloud interactive' -- it will fail.
- Always include all required parameters.
- Ensure parameter values match the expected format.

## Adhere to the following restrictions:
- **No command substitution**: Do not use subshells or command substitution (e.g., $(...))
- **No pipes**: Do not use pipes (i.e., |) or any other shell-specific operators
- **No redirection**: Do not use redirection operators (e.g., >, >>, <)"""


@gcloud_tool
def run_gcloud_command(
    engine: AdmissionEngine, cli: GcloudCli, args: list[str]
) -> ToolResult:
    """Runs admission control on ``args`` and executes them if permitted.

    Policy denials come back as plain text for the agent to act on. Only
    failures of gcloud itself are flagged as errors.
    """
    if engine.is_debug_request(args):
        return ToolResult.success(engine.describe_config())

    try:
        verdict = engine.evaluate(args)
    except OracleError as e:
        logger.error(f"Lint oracle failed for {args}: {e}")
        return ToolResult.error(f"Unable to verify the gcloud command: {e}")

    set_span_attribute("admission.decision", verdict.decision.value)
    if not verdict.allowed:
        return ToolResult.success(verdict.reason)

    logger.info(f"Executing run_gcloud_command: {verdict.command_path}")
    try:
        result = cli.invoke(strip_program_name(args))
    except CliUnavailableError as e:
        return ToolResult.error(str(e))

    # A non-zero exit may still come with partial output on stdout.
    output = result.stdout
    if not result.ok or result.stderr:
        output += f"\nstderr:\n{result.stderr}"
    return ToolResult.success(output)
