"""Shared test fixtures for gcloud MCP tests."""

import json

import pytest

from gcloud_mcp.config import AccessConfig
from gcloud_mcp.schema import CliResult
from gcloud_mcp.tools.admission.engine import AdmissionEngine
from gcloud_mcp.tools.gcloud.cli import GcloudCli
from gcloud_mcp.tools.gcloud.lint import LINT_COMMAND, LintOracle

TEST_DEFAULT_DENY = ("interactive", "compute ssh")


# ============================================================================
# Fake gcloud
# ============================================================================


class FakeGcloud(GcloudCli):
    """Records every invocation and answers lint calls like gcloud would.

    By default a command lints successfully and its canonical path is every
    token that does not start with ``-``. Tests override that per command
    string via ``canonical`` and make commands unparseable via ``invalid``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[list[str]] = []
        self.invalid: set[str] = set()
        self.canonical: dict[str, str] = {}
        self.outputs: dict[tuple[str, ...], CliResult] = {}
        self.default_output = CliResult(code=0, stdout="output", stderr="")

    def invoke(self, args: list[str]) -> CliResult:
        self.calls.append(list(args))
        if tuple(args) in self.outputs:
            return self.outputs[tuple(args)]
        if list(args[:2]) == LINT_COMMAND:
            return self._lint(args[3])
        return self.default_output

    def is_available(self) -> bool:
        return True

    def _lint(self, command_string: str) -> CliResult:
        command = command_string.removeprefix("gcloud ")
        if command in self.invalid:
            return CliResult(
                code=1, stdout="", stderr=f"ERROR: Invalid command: {command}"
            )
        path = self.canonical.get(command) or " ".join(
            t for t in command.split() if not t.startswith("-")
        )
        entry = {
            "command_string": command_string,
            "success": True,
            "command_string_no_args": f"gcloud {path}",
            "error_message": None,
        }
        return CliResult(code=0, stdout=json.dumps([entry]), stderr="")

    @property
    def lint_calls(self) -> list[str]:
        return [
            c[3].removeprefix("gcloud ") for c in self.calls if c[:2] == LINT_COMMAND
        ]

    @property
    def executed(self) -> list[list[str]]:
        return [c for c in self.calls if c[:2] != LINT_COMMAND]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_gcloud() -> FakeGcloud:
    return FakeGcloud()


@pytest.fixture
def make_engine(fake_gcloud):
    """Factory for an engine wired to the fake gcloud."""

    def _make(allow: list[str] | None = None, deny: list[str] | None = None):
        config = AccessConfig(allow=allow or [], deny=deny or [])
        return AdmissionEngine(
            config, LintOracle(fake_gcloud), default_deny=TEST_DEFAULT_DENY
        )

    return _make
