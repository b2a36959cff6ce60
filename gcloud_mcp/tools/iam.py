"""The check_iam_permissions tool."""

import json
import logging

from ..schema import ToolResult
from .common import gcloud_tool
from .gcloud.cli import GcloudCli
from .gcloud.errors import GcloudError

logger = logging.getLogger(__name__)

DESCRIPTION = """Checks whether the current authenticated account has specific IAM permissions on a GCP project.

## Use Cases:
- Use this tool BEFORE running a command to verify you have the necessary permissions.
- Use this tool to debug "permission denied" errors by checking which permissions are missing.

## Common Permissions:
- compute.instances.create - Create VMs
- storage.buckets.create - Create GCS buckets
- run.services.create - Deploy Cloud Run services
- container.clusters.create - Create GKE clusters

## Returns:
A list of permissions with their granted/denied status."""


def parse_granted_permissions(stdout: str) -> set[str]:
    try:
        parsed = json.loads(stdout)
    except json.JSONDecodeError:
        logger.warning("test-iam-permissions returned non-JSON output")
        return set()
    if not isinstance(parsed, dict):
        return set()
    return set(parsed.get("permissions") or [])


def format_permission_report(project: str, results: dict[str, bool]) -> str:
    granted = [p for p, ok in results.items() if ok]
    denied = [p for p, ok in results.items() if not ok]

    output = f"""# IAM Permission Check Results

**Project:** {project}

## Summary
- ✅ Granted: {len(granted)}
- ❌ Denied: {len(denied)}

## Details

| Permission | Status |
|------------|--------|
"""
    for permission, ok in results.items():
        status = "✅ Granted" if ok else "❌ Denied"
        output += f"| {permission} | {status} |\n"

    if denied:
        missing = "\n".join(f"- {p}" for p in denied)
        output += f"""
## Missing Permissions

The following permissions are not granted to your account:
{missing}

To request these permissions, contact your project administrator or request a role that includes them."""
    return output


@gcloud_tool
def check_iam_permissions(
    cli: GcloudCli, project: str, permissions: list[str]
) -> ToolResult:
    try:
        result = cli.invoke(
            [
                "projects",
                "test-iam-permissions",
                project,
                f"--permissions={','.join(permissions)}",
                "--format=json",
            ]
        )
    except GcloudError as e:
        return ToolResult.error(f"Failed to check IAM permissions: {e}")

    if not result.ok:
        return ToolResult.error(
            f"Failed to test permissions: {result.stderr or 'Unknown error'}"
        )

    granted = parse_granted_permissions(result.stdout)
    results = {p: p in granted for p in permissions}
    return ToolResult.success(format_permission_report(project, results))
