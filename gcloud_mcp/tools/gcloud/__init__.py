"""gcloud process access."""

from .cli import GcloudCli
from .errors import (
    CliUnavailableError,
    GcloudError,
    MalformedLintOutputError,
    OracleError,
    OracleUnavailableError,
)
from .lint import LintOracle

__all__ = [
    "CliUnavailableError",
    "GcloudCli",
    "GcloudError",
    "LintOracle",
    "MalformedLintOutputError",
    "OracleError",
    "OracleUnavailableError",
]
