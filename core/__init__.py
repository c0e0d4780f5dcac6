# =============================================================================
# core/__init__.py
# =============================================================================
# Business logic for the Unipile MCP server: configuration, credential
# resolution, the Unipile HTTP client, normalization, the tool registry and
# the tool handlers themselves.
#
# RULE: nothing in this package imports FastMCP.  The tools/ package is the
# only place that knows about the MCP protocol, so everything here can be
# tested with plain pytest and a fake HTTP transport.
# =============================================================================
