# =============================================================================
# core/results.py  —  ToolResult Builders (success + error envelope)
# =============================================================================
#
# Every tool call ends here.  Success → pretty JSON text.  Failure → one
# human-readable line with isError set.  Nothing is raised to the host.
#
#   UpstreamError          "❌ Failed to list accounts (Status: 500): server exploded"
#   other known failures   their own sentence (missing key, no Gmail account)
#   anything unexpected    treated like an upstream failure with no status
# =============================================================================

import json
from typing import Any

from core.errors import ToolInvocationError, UpstreamError
from core.models import TextContent, ToolResult


def success_result(payload: Any) -> ToolResult:
    """Wrap a JSON-serializable payload as a successful ToolResult.

    Key order follows the payload's own order (dataclass field order for
    accounts and messages), so repeated calls print identically.
    """
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    return ToolResult(content=[TextContent(text=text)])


def error_result(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)], is_error=True)


def failure_result(error: BaseException, operation: str) -> ToolResult:
    """Convert any exception raised during a tool call into an error result.

    Args:
        error: What went wrong.
        operation: Short verb phrase for the message, e.g. "fetch emails".
    """
    if isinstance(error, UpstreamError):
        return error_result(
            f"❌ Failed to {operation} (Status: {error.status_label}): {error.message}"
        )
    if isinstance(error, ToolInvocationError):
        return error_result(str(error))
    return error_result(f"❌ Failed to {operation} (Status: Unknown): {str(error) or 'Unknown error'}")
