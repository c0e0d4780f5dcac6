# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the Unipile tools from core/messaging.py over MCP.  Each tool
#   is generated from its registry spec and is a thin wrapper: it pulls the
#   per-call credential out of the MCP request, hands off to the
#   ToolRegistry, and converts the ToolResult into what FastMCP understands.
#
# HOW IT WORKS (the flow):
#   1. The host (an agent runtime) calls a tool by name over stdio
#   2. FastMCP routes the call to the RegistryTool built for that name
#   3. The tool builds an InvocationContext from the request "_meta"
#   4. run_tool() → ToolRegistry.invoke() → Unipile → normalized JSON
#   5. Success: the JSON text is returned
#      Failure: ToolError(text) is raised, which FastMCP sends back as a
#               result with isError=true and the same text
#
# RUNNING THIS SERVER:
#     a) python main.py                (loads .env, validates config)
#     b) python -m tools.mcp_server    (same thing, without .env loading)
# =============================================================================

import json
import logging
import sys
from typing import Any

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_context
from fastmcp.tools import Tool
from fastmcp.tools import ToolResult as FastMCPToolResult

from core.config import Settings, load_settings
from core.messaging import GET_GMAIL_EMAILS_TOOL, build_registry
from core.models import InvocationContext, ToolResult, ToolSpec
from core.registry import ToolRegistry

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT is the MCP transport.  Anything we print there corrupts the JSON-RPC
# stream, so every log line goes to STDERR.
#
#   CYAN    incoming tool calls
#   YELLOW  intermediate status
#   GREEN   responses (RED when isError is set)
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logger = logging.getLogger("mcp")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, context: InvocationContext, **params) -> None:
    """Log an incoming tool call in CYAN.  The credential itself is never logged."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    source = "payload" if context.credential_override else "default"
    logger.info(f"{_CYAN}{tool_name} called with: {param_str} (key from {source}){_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: ToolResult) -> ToolResult:
    """Log the result in GREEN (or RED on error), then return it."""
    color = _RED if result.is_error else _GREEN
    logger.info(f"{color}  ← {tool_name} response: {json.dumps(result.to_dict(), ensure_ascii=False)}{_RESET}")
    return result


# =============================================================================
# Server + registry
# =============================================================================
# The registry is built lazily so that importing this module (tests, tooling)
# does not require UNIPILE_DSN.  main.py calls configure() with the Settings
# it already validated; that is also when the MCP tools are added.
# =============================================================================
# Re-configuring replaces the tools instead of warning about duplicates.
mcp = FastMCP("UNIPILE", version="1.0.0", on_duplicate="replace")

_registry: ToolRegistry | None = None


def configure(settings: Settings, registry: ToolRegistry | None = None) -> ToolRegistry:
    """Install the registry the MCP tools dispatch to and expose its tools."""
    global _registry
    _registry = registry or build_registry(settings)
    expose(_registry)
    return _registry


def get_registry() -> ToolRegistry:
    if _registry is None:
        return configure(load_settings())
    return _registry


def context_from_request(ctx: Context | None) -> InvocationContext:
    """Read the per-call credential from the MCP request ``_meta``."""
    if ctx is None:
        return InvocationContext()
    try:
        request_context = ctx.request_context
    except (LookupError, RuntimeError, ValueError):
        # No active MCP request (e.g. called outside a session)
        return InvocationContext()
    return InvocationContext.from_meta(getattr(request_context, "meta", None))


async def run_tool(name: str, arguments: dict[str, Any], context: InvocationContext) -> str:
    """Dispatch one call and translate the ToolResult for FastMCP.

    Returns:
        The result text on success.

    Raises:
        ToolError: the tool reported a failure; the message is the
            user-visible error line.
    """
    _log_request(name, context, **arguments)
    result = _log_response(name, await get_registry().invoke(name, arguments, context))
    if result.is_error:
        raise ToolError(result.text)
    return result.text


# =============================================================================
# MCP tools, generated from the registry
# =============================================================================
# The registry owns each tool's name, description and input schema.  Every
# spec becomes one RegistryTool; there is no second, hand-written copy for
# FastMCP to drift from.
#
# RegistryTool is a plain Tool, not a decorated function, so FastMCP does
# not build a pydantic model for the arguments.  Whatever the host sends
# ("ten", 5.5, stray keys) reaches ToolRegistry.invoke() unchanged.
# =============================================================================
class RegistryTool(Tool):
    """One registry tool exposed over MCP."""

    @classmethod
    def from_spec(cls, spec: ToolSpec) -> "RegistryTool":
        return cls(name=spec.name, description=spec.description, parameters=spec.json_schema)

    async def run(self, arguments: dict[str, Any]) -> FastMCPToolResult:
        try:
            ctx = get_context()
        except RuntimeError:
            ctx = None
        context = context_from_request(ctx)
        if self.name == GET_GMAIL_EMAILS_TOOL:
            # Two upstream calls: the accounts list first, then the messages
            # of the GOOGLE_OAUTH account with a @gmail.com address.
            _log_status("Auto-detecting Gmail account")
        return FastMCPToolResult(content=await run_tool(self.name, arguments, context))


def expose(registry: ToolRegistry) -> list[RegistryTool]:
    """Add (or replace) one MCP tool per registry spec."""
    return [mcp.add_tool(RegistryTool.from_spec(spec)) for spec in registry]


def serve(settings: Settings) -> None:
    """Bind the registry to ``settings`` and serve over stdio until EOF."""
    registry = configure(settings)
    _log_status(f"Serving {len(registry)} tool(s): {', '.join(registry.names())}")
    mcp.run()


if __name__ == "__main__":
    _settings = load_settings()
    configure_logging(_settings.log_level)
    serve(_settings)
