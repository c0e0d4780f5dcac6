# =============================================================================
# core/registry.py  —  Tool Registry / Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Holds the named tools, their input schemas, and routes an invocation to
#   the matching handler.
#
# INPUT HANDLING:
#   The only "validation" is filling in declared defaults for optional
#   parameters that were not sent.  No type coercion, no rejection: a bad
#   value goes straight to the handler and, if Unipile dislikes it, comes
#   back as an upstream error.
#
# FAILURE POLICY:
#   invoke() ALWAYS returns a ToolResult for a known tool.  The only
#   exception it raises is UnknownToolError (the host asked for a tool that
#   does not exist; that is the host's bug, not a tool failure).
# =============================================================================

import logging
from collections.abc import Iterator
from typing import Any

from core.errors import ToolInvocationError, UnknownToolError
from core.models import InvocationContext, ToolHandler, ToolResult, ToolSpec
from core.results import failure_result

logger = logging.getLogger(__name__)


def apply_defaults(schema: dict[str, dict[str, Any]], arguments: dict[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``arguments`` with schema defaults filled in.

    A parameter counts as missing when the key is absent or its value is
    None.  Keys the schema does not declare are passed through untouched.
    """
    merged = dict(arguments or {})
    for param, declaration in schema.items():
        if "default" in declaration and merged.get(param) is None:
            merged[param] = declaration["default"]
    return merged


class ToolRegistry:
    """Named tools + dispatch.  One instance per server process."""

    def __init__(self):
        self._tools: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        input_schema: dict[str, dict[str, Any]] | None,
        handler: ToolHandler,
        operation: str | None = None,
    ) -> ToolSpec:
        if name in self._tools:
            raise ValueError(f"Tool {name!r} is already registered")
        spec = ToolSpec(
            name=name,
            description=description,
            input_schema=dict(input_schema or {}),
            handler=handler,
            operation=operation or name,
        )
        self._tools[name] = spec
        logger.debug("Registered tool %r", name)
        return spec

    def tool(
        self,
        name: str,
        description: str,
        input_schema: dict[str, dict[str, Any]] | None = None,
        operation: str | None = None,
    ):
        """Decorator form of register().

        Usage:
            @registry.tool("unipile_list_all_accounts", "List accounts", operation="list accounts")
            async def list_accounts(arguments, context): ...
        """
        def decorator(handler: ToolHandler) -> ToolHandler:
            self.register(name, description, input_schema, handler, operation)
            return handler
        return decorator

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def names(self) -> list[str]:
        return list(self._tools)

    def manifest(self) -> list[dict[str, Any]]:
        """Tool list in the shape a host expects for discovery."""
        return [
            {"name": spec.name, "description": spec.description, "inputSchema": spec.json_schema}
            for spec in self._tools.values()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[ToolSpec]:
        """Registered specs, in registration order."""
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        context: InvocationContext | None = None,
    ) -> ToolResult:
        """Run a tool and return its result.

        Raises:
            UnknownToolError: ``name`` is not registered.
        """
        spec = self.get(name)
        arguments = apply_defaults(spec.input_schema, arguments)
        context = context or InvocationContext()

        try:
            return await spec.handler(arguments, context)
        except ToolInvocationError as exc:
            logger.info("%s failed: %s", name, exc)
            return failure_result(exc, spec.operation)
        except Exception as exc:
            logger.exception("Unexpected error in tool %r", name)
            return failure_result(exc, spec.operation)
