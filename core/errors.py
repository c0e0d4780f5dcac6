# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the server can hit falls into one of these buckets:
#
#   ConfigurationError      startup only; the process refuses to start
#   CredentialMissingError  no API key for this call        ─┐
#   UpstreamError           Unipile said no / network died   ├─ per-call
#   NotFoundError           no Gmail account to read from   ─┘
#
# The per-call errors all derive from ToolInvocationError.  The registry
# catches that base class and turns it into an error ToolResult, so none of
# them ever reach the host as an exception.
#
# "No results" is NOT an error; see core/normalizer.py (sentinel object).
# =============================================================================


class ConfigurationError(Exception):
    """A required startup setting is missing or invalid."""


class UnknownToolError(LookupError):
    """The host asked for a tool name that was never registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name!r}")
        self.name = name


class ToolInvocationError(Exception):
    """Base class for failures that end a single tool call.

    The message is user-visible: it is shown to the host verbatim.
    """


class CredentialMissingError(ToolInvocationError):
    def __init__(self, message: str = "❌ Missing Unipile API Key (set in .env or payload)"):
        super().__init__(message)


class NotFoundError(ToolInvocationError):
    """A related resource the tool depends on does not exist upstream."""


class UpstreamError(ToolInvocationError):
    """Non-2xx response or transport failure talking to Unipile.

    Args:
        status_code: HTTP status, or None when no response arrived at all
                     (DNS failure, refused connection, timeout, ...).
        message: The upstream body's "message" field when present, else
                 the transport-level error text.
    """

    def __init__(self, status_code: int | None, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def status_label(self) -> str:
        return str(self.status_code) if self.status_code is not None else "Unknown"
