"""Common utilities for gcloud MCP tools."""

from .decorators import gcloud_tool
from .telemetry import set_span_attribute, setup_telemetry

__all__ = ["gcloud_tool", "set_span_attribute", "setup_telemetry"]
