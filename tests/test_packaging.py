"""Checks on the declared dependencies."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_mcp_is_pinned_below_2():
    # mcp.server.fastmcp is only available on the 1.x line
    project = tomllib.loads(PYPROJECT.read_text())["project"]
    mcp_requirement = next(d for d in project["dependencies"] if d.startswith("mcp"))
    assert "<2" in mcp_requirement
