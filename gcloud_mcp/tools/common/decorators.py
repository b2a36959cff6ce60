"""Decorators for gcloud MCP tools with OpenTelemetry instrumentation."""

import functools
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from ...schema import ToolResult

logger = logging.getLogger(__name__)

# Initialize OTel instruments
tracer = trace.get_tracer("gcloud_mcp.tools")
meter = metrics.get_meter("gcloud_mcp.tools")

tool_execution_duration = meter.create_histogram(
    name="gcloud_mcp.tool.execution_duration",
    description="Duration of tool executions",
    unit="ms",
)
tool_execution_count = meter.create_counter(
    name="gcloud_mcp.tool.execution_count",
    description="Total number of tool calls",
    unit="1",
)


_RECORDED_TYPES = (str, int, float, bool, list, tuple, type(None))


def _record_attributes(span: trace.Span, bound_args: inspect.BoundArguments) -> None:
    for k, v in bound_args.arguments.items():
        # Injected collaborators (engine, cli) have nothing useful to record
        if not isinstance(v, _RECORDED_TYPES):
            continue
        # Truncate long strings to avoid span attribute limits
        val_str = str(v)
        if len(val_str) > 1000:
            val_str = val_str[:1000] + "...(truncated)"
        span.set_attribute(f"arg.{k}", val_str)


def gcloud_tool(func: Callable[..., ToolResult]) -> Callable[..., ToolResult]:
    """Decorator to mark a function as a gcloud MCP tool handler.

    This decorator provides:
    - OTel Spans for every execution
    - OTel Metrics (count and duration)
    - Standardized Logging of args and results/errors

    A returned ``ToolResult`` with ``is_error`` set is counted as a failure.
    Exceptions are logged and re-raised.

    Example:
        @gcloud_tool
        def get_gcloud_context(cli: GcloudCli) -> ToolResult:
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> ToolResult:
        tool_name = func.__name__
        start_time = time.time()
        success = True

        with tracer.start_as_current_span(tool_name) as span:
            span.set_attribute("tool.name", tool_name)
            span.set_attribute("code.function", tool_name)

            try:
                bound = inspect.signature(func).bind(*args, **kwargs)
                bound.apply_defaults()
                arg_str = ", ".join(
                    f"{k}={repr(v)[:200]}" for k, v in bound.arguments.items()
                )
                _record_attributes(span, bound)
            except TypeError:
                arg_str = f"args={args}, kwargs={kwargs}"

            logger.info(f"🛠️  Tool Call: '{tool_name}' | Args: {arg_str}")

            try:
                result = func(*args, **kwargs)
                duration_ms = (time.time() - start_time) * 1000
                if result.is_error:
                    success = False
                    span.set_status(Status(StatusCode.ERROR, result.text[:200]))
                    logger.warning(
                        f"⚠️  Tool Error Result: '{tool_name}' | Duration: {duration_ms:.2f}ms"
                    )
                else:
                    logger.info(
                        f"✅ Tool Success: '{tool_name}' | Duration: {duration_ms:.2f}ms"
                    )

                result_str = repr(result)
                if len(result_str) > 1000:
                    result_str = result_str[:1000] + "... (truncated)"
                logger.debug(f"Tool '{tool_name}' RESULT: {result_str}")
                return result
            except Exception as e:
                success = False
                duration_ms = (time.time() - start_time) * 1000
                logger.error(
                    f"❌ Tool Failed: '{tool_name}' | Duration: {duration_ms:.2f}ms | Error: {e}",
                    exc_info=True,
                )
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise
            finally:
                duration_ms = (time.time() - start_time) * 1000
                tool_execution_duration.record(
                    duration_ms, {"tool.name": tool_name, "success": str(success)}
                )
                tool_execution_count.add(
                    1, {"tool.name": tool_name, "success": str(success)}
                )

    return wrapper
