"""The get_gcloud_context tool."""

import logging

from pydantic import BaseModel

from ..schema import ToolResult
from .common import gcloud_tool
from .gcloud.cli import GcloudCli
from .gcloud.errors import GcloudError

logger = logging.getLogger(__name__)

DESCRIPTION = """Returns the current gcloud CLI context including active account, project, region, zone, and configuration name.

## Use Cases:
- Use this tool at the start of a session to understand the current GCP environment.
- Use this tool to verify which project/account will be used before executing commands.
- Use this tool when the user asks about their current GCP configuration.

## Returns:
- account: The active GCP account email
- project: The default project ID
- region: The default compute region
- zone: The default compute zone
- configuration: The active gcloud configuration name"""


class GcloudContext(BaseModel):
    account: str | None = None
    project: str | None = None
    region: str | None = None
    zone: str | None = None
    configuration: str | None = None


def parse_config_value(output: str) -> str | None:
    value = output.strip()
    return None if value in ("", "(unset)") else value


def fetch_context(cli: GcloudCli) -> GcloudContext:
    def value(args: list[str]) -> str | None:
        return parse_config_value(cli.invoke(args).stdout)

    return GcloudContext(
        account=value(["config", "get-value", "account"]),
        project=value(["config", "get-value", "project"]),
        region=value(["config", "get-value", "compute/region"]),
        zone=value(["config", "get-value", "compute/zone"]),
        configuration=value(
            [
                "config",
                "configurations",
                "list",
                "--filter=is_active=true",
                "--format=value(name)",
            ]
        ),
    )


def format_context(context: GcloudContext) -> str:
    output = f"""# Current gcloud Context

| Property | Value |
|----------|-------|
| Account | {context.account or '(not set)'} |
| Project | {context.project or '(not set)'} |
| Region | {context.region or '(not set)'} |
| Zone | {context.zone or '(not set)'} |
| Configuration | {context.configuration or 'default'} |
"""
    missing = [
        name
        for name in ("project", "region", "zone")
        if getattr(context, name) is None
    ]
    if missing:
        output += f"""
## Note
The following properties are not set: {', '.join(missing)}.
Some commands may require these values to be specified explicitly."""
    return output


@gcloud_tool
def get_gcloud_context(cli: GcloudCli) -> ToolResult:
    try:
        context = fetch_context(cli)
    except GcloudError as e:
        return ToolResult.error(f"Failed to get gcloud context: {e}")
    return ToolResult.success(format_context(context))
