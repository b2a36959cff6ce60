"""gcloud MCP tools.

Admission control (tools.admission):
    - Command normalization and release-track helpers
    - Allow/deny list matching
    - Release-track fallback suggestions
    - The admission decision engine

gcloud process access (tools.gcloud):
    - GcloudCli process wrapper
    - Lint oracle adapter

Tool handlers:
    - run_gcloud_command, get_gcloud_context,
      research_gcloud_command, check_iam_permissions
"""
