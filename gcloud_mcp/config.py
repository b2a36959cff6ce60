"""Access configuration for the gcloud MCP server.

The configuration is a JSON file holding either an allowlist or a denylist of
gcloud command path prefixes. It is loaded once at start-up and never changes
afterwards. Both of these shapes are accepted::

    {"allow": ["compute instances list"]}

    {"run_gcloud_command": {"denylist": ["projects delete"]}}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Configuration file path (can be overridden on the command line)
CONFIG_PATH_ENV = "GCLOUD_MCP_CONFIG"

TOOL_SECTION = "run_gcloud_command"

# Interactive, SSH and tunnel style commands cannot work through a tool call.
DEFAULT_DENYLIST: tuple[str, ...] = (
    "compute start-iap-tunnel",
    "compute connect-to-serial-port",
    "compute tpus tpu-vm ssh",
    "compute tpus queued-resources ssh",
    "compute ssh",
    "cloud-shell ssh",
    "workstations ssh",
    "app instances ssh",
    "interactive",
    "meta",
)


class ConfigError(Exception):
    """The configuration file could not be read or parsed."""


class ConfigConflictError(ConfigError, ValueError):
    """Both an allowlist and a custom denylist were configured."""


class AccessConfig(BaseModel):
    """User-supplied allow/deny lists, entries kept verbatim."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    allow: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("allow", "allowlist")
    )
    deny: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("deny", "denylist")
    )

    def ensure_consistent(self) -> "AccessConfig":
        """Raises ConfigConflictError if both lists are non-empty."""
        if self.allow and self.deny:
            raise ConfigConflictError(
                "A configuration cannot contain both an allowlist and a denylist."
            )
        return self


def parse_config(data: dict[str, Any]) -> AccessConfig:
    """Builds an AccessConfig from decoded JSON, top-level or per-tool shaped."""
    section = data.get(TOOL_SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{TOOL_SECTION}' must be an object")
    try:
        config = AccessConfig.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
    return config.ensure_consistent()


def load_config(path: str | os.PathLike[str] | None = None) -> AccessConfig:
    """Loads the access configuration.

    Args:
        path: Absolute path to a JSON file. Falls back to the
            ``GCLOUD_MCP_CONFIG`` environment variable; with neither set an
            empty configuration (default denylist only) is returned.

    Raises:
        ConfigError: The path is relative, unreadable or not valid JSON.
        ConfigConflictError: Both an allowlist and a denylist are present.
    """
    raw_path = path or os.getenv(CONFIG_PATH_ENV)
    if not raw_path:
        return AccessConfig()

    config_path = Path(raw_path)
    if not config_path.is_absolute():
        raise ConfigError(f"Config file path must be absolute: {config_path}")

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error reading or parsing config file {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a JSON object")

    config = parse_config(data)
    logger.info(
        f"Loaded config from {config_path}: "
        f"{len(config.allow)} allowed, {len(config.deny)} denied"
    )
    return config
