"""Exceptions raised while talking to the gcloud CLI."""


class GcloudError(Exception):
    """Base class for gcloud CLI failures."""


class CliUnavailableError(GcloudError):
    """The gcloud executable could not be started."""


class OracleError(GcloudError):
    """The lint oracle itself misbehaved (as opposed to rejecting a command)."""


class OracleUnavailableError(OracleError):
    """The lint subprocess could not be run."""


class MalformedLintOutputError(OracleError):
    """The lint subprocess succeeded but printed no usable entries."""
