"""gcloud MCP server.

Exposes the gcloud CLI to AI agents through the Model Context Protocol, with
admission control (lint, allow/deny lists, release-track suggestions) in
front of every command.
"""

__version__ = "0.1.0"
