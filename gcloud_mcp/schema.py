"""Pydantic schemas for the gcloud MCP server.

This module defines Pydantic schemas for:
- Raw gcloud process results (CliResult)
- Lint oracle results (LintResult)
- Admission control verdicts (Verdict)
- Tool results returned to the calling agent (ToolResult)
"""

from enum import Enum

from pydantic import BaseModel, Field


class Decision(str, Enum):
    """Terminal state of the admission decision engine."""

    ALLOWED = "allowed"
    DENIED = "denied"
    DENIED_WITH_SUGGESTION = "denied_with_suggestion"


class DenialKind(str, Enum):
    """Why a command was refused."""

    SYNTAX_INVALID = "syntax_invalid"
    ALLOWLIST_MISS = "allowlist_miss"
    DENYLIST_HIT = "denylist_hit"


# =============================================================================
# Process Schemas
# =============================================================================


class CliResult(BaseModel):
    """Everything a finished gcloud process produced, including non-zero codes."""

    code: int | None = Field(description="Process exit code")
    stdout: str = Field(default="", description="Captured standard output")
    stderr: str = Field(default="", description="Captured standard error")

    @property
    def ok(self) -> bool:
        return self.code == 0


class LintResult(BaseModel):
    """Outcome of a single lint oracle call."""

    valid: bool = Field(description="Whether the command string parses")
    command_path: str | None = Field(
        default=None,
        description="Group path and leaf verb, without program name, flags or positionals",
    )
    error: str | None = Field(default=None, description="Oracle diagnostic if invalid")
    raw_output: str = Field(default="", description="Unparsed oracle output")


# =============================================================================
# Admission Schemas
# =============================================================================


class Verdict(BaseModel):
    """Result of admission control for one invocation."""

    decision: Decision
    reason: str = Field(description="Agent-readable rationale")
    kind: DenialKind | None = Field(default=None, description="Set for denials")
    command_path: str | None = Field(
        default=None, description="Canonical command path that was evaluated"
    )
    suggested_alternative: str | None = Field(
        default=None,
        description="Full alternative command (flags and positionals included)",
    )

    @property
    def allowed(self) -> bool:
        return self.decision == Decision.ALLOWED


class ToolResult(BaseModel):
    """Text result of a tool call, flagged when the system itself failed or refused."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(text=text)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(text=text, is_error=True)
