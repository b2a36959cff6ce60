"""MCP server exposing gcloud tools.

Dependencies (the gcloud process wrapper and the admission engine) are
constructed here and passed into each handler; the handlers themselves hold
no global state.
"""

import logging
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from .config import DEFAULT_DENYLIST, AccessConfig
from .schema import ToolResult
from .tools.admission.engine import AdmissionEngine
from .tools.context import DESCRIPTION as CONTEXT_DESCRIPTION
from .tools.context import get_gcloud_context
from .tools.gcloud.cli import GcloudCli
from .tools.gcloud.lint import LintOracle
from .tools.iam import DESCRIPTION as IAM_DESCRIPTION
from .tools.iam import check_iam_permissions
from .tools.research import DESCRIPTION as RESEARCH_DESCRIPTION
from .tools.research import research_gcloud_command
from .tools.run_command import DESCRIPTION as RUN_DESCRIPTION
from .tools.run_command import run_gcloud_command

logger = logging.getLogger(__name__)

SERVER_NAME = "gcloud-mcp-server"


def _unwrap(result: ToolResult) -> str:
    """Maps an error result onto an MCP error response."""
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def create_mcp_server(
    config: AccessConfig | None = None, cli: GcloudCli | None = None
) -> FastMCP:
    """Builds the MCP server with every gcloud tool registered.

    Args:
        config: User allow/deny lists. Validated here so a conflicting
            configuration never reaches a running server.
        cli: The gcloud process wrapper; a default one is created if omitted.

    Raises:
        ConfigConflictError: Both an allowlist and a denylist are configured.
    """
    config = (config or AccessConfig()).ensure_consistent()
    cli = cli or GcloudCli()
    engine = AdmissionEngine(config, LintOracle(cli), default_deny=DEFAULT_DENYLIST)

    server = FastMCP(SERVER_NAME)

    @server.tool(name="run_gcloud_command", description=RUN_DESCRIPTION)
    def run_gcloud_command_tool(
        args: Annotated[
            list[str], Field(description="gcloud arguments, without the leading 'gcloud'")
        ],
    ) -> str:
        return _unwrap(run_gcloud_command(engine, cli, args))

    @server.tool(name="get_gcloud_context", description=CONTEXT_DESCRIPTION)
    def get_gcloud_context_tool() -> str:
        return _unwrap(get_gcloud_context(cli))

    @server.tool(name="research_gcloud_command", description=RESEARCH_DESCRIPTION)
    def research_gcloud_command_tool(
        args: Annotated[
            list[str],
            Field(description="gcloud command to research, e.g. ['compute', 'instances', 'create']"),
        ],
    ) -> str:
        return _unwrap(research_gcloud_command(engine, cli, args))

    @server.tool(name="check_iam_permissions", description=IAM_DESCRIPTION)
    def check_iam_permissions_tool(
        project: Annotated[
            str, Field(description="The GCP project ID to check permissions against")
        ],
        permissions: Annotated[
            list[str],
            Field(description='IAM permissions to check, e.g. ["compute.instances.create"]'),
        ],
    ) -> str:
        return _unwrap(check_iam_permissions(cli, project, permissions))

    logger.info(
        f"Created {SERVER_NAME} ({len(config.allow)} allowed, "
        f"{len(config.deny)} user denied, {len(DEFAULT_DENYLIST)} default denied)"
    )
    return server
