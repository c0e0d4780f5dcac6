# =============================================================================
# tools/__init__.py
# =============================================================================
# FastMCP wrappers around core/.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP host and core/.  It:
#     1. Reads the per-call credential from the MCP request "_meta"
#     2. Dispatches to core.registry.ToolRegistry
#     3. Maps ToolResult.is_error onto FastMCP's ToolError
#
# WHAT TOOLS DO NOT DO:
#   - No HTTP calls (core/unipile_client.py)
#   - No reshaping of Unipile data (core/normalizer.py)
#   - No error formatting (core/results.py)
# =============================================================================
