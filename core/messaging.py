# =============================================================================
# core/messaging.py  —  The Two Unipile Tools
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Defines the tool handlers and wires them into a ToolRegistry:
#
#     unipile_list_all_accounts   1 upstream call
#     unipile_get_gmail_emails    2 upstream calls, strictly in order:
#                                   a) list accounts → pick the Gmail one
#                                   b) list that account's messages
#
# Each handler follows the same recipe:
#   resolve key → call Unipile → normalize → success_result
# and simply raises on failure; ToolRegistry.invoke turns the exception
# into an error ToolResult.
#
# Nothing here touches FastMCP. tools/mcp_server.py does the MCP wiring.
# =============================================================================

import logging
from typing import Any

from core.config import Settings
from core.credentials import resolve_api_key
from core.errors import NotFoundError
from core.models import InvocationContext, ToolResult
from core.normalizer import as_payload, normalize_accounts, normalize_messages
from core.registry import ToolRegistry
from core.results import success_result
from core.unipile_client import UnipileClient

logger = logging.getLogger(__name__)

GMAIL_DOMAIN = "@gmail.com"
GMAIL_ACCOUNT_TYPE = "GOOGLE_OAUTH"
DEFAULT_MAX_RESULTS = 10

LIST_ACCOUNTS_TOOL = "unipile_list_all_accounts"
GET_GMAIL_EMAILS_TOOL = "unipile_get_gmail_emails"

GET_GMAIL_EMAILS_SCHEMA: dict[str, dict[str, Any]] = {
    "maxResults": {
        "type": "number",
        "default": DEFAULT_MAX_RESULTS,
        "description": "Maximum number of emails to retrieve",
    },
}


def is_gmail_account(record: dict[str, Any]) -> bool:
    """Both checks are required: a Gmail address AND Google OAuth."""
    email = record.get("email")
    return (
        isinstance(email, str)
        and GMAIL_DOMAIN in email
        and record.get("type") == GMAIL_ACCOUNT_TYPE
    )


def find_gmail_account(records: list[dict[str, Any]]) -> dict[str, Any]:
    """Return the first Gmail-compatible account record.

    Raises:
        NotFoundError: no record passes is_gmail_account().
    """
    for record in records:
        if is_gmail_account(record):
            return record
    raise NotFoundError(f"❌ No Gmail-compatible account found ({GMAIL_ACCOUNT_TYPE} type).")


def build_registry(settings: Settings, client: UnipileClient | None = None) -> ToolRegistry:
    """Create a registry with both Unipile tools bound to ``settings``.

    Args:
        settings: Startup configuration (default key, base URL).
        client: Upstream client to use.  Built from ``settings`` if omitted;
                tests pass one with a mock transport.
    """
    client = client or UnipileClient(settings)
    registry = ToolRegistry()

    @registry.tool(
        LIST_ACCOUNTS_TOOL,
        "List all messaging accounts connected to Unipile",
        operation="list accounts",
    )
    async def list_all_accounts(arguments: dict[str, Any], context: InvocationContext) -> ToolResult:
        api_key = resolve_api_key(context, settings)
        records = await client.list_accounts(api_key)
        accounts = normalize_accounts(records)
        logger.info("Fetched %d account(s)", len(accounts))
        return success_result(as_payload(accounts, "accounts"))

    @registry.tool(
        GET_GMAIL_EMAILS_TOOL,
        "Fetch recent emails from connected Gmail account (auto-detects account)",
        GET_GMAIL_EMAILS_SCHEMA,
        operation="fetch emails",
    )
    async def get_gmail_emails(arguments: dict[str, Any], context: InvocationContext) -> ToolResult:
        api_key = resolve_api_key(context, settings)

        # Step 1: find the Gmail account (short-circuits if there is none)
        gmail = find_gmail_account(await client.list_accounts(api_key))
        logger.info("Using Gmail account %s", gmail.get("id"))

        # Step 2: fetch its recent messages
        max_results = arguments.get("maxResults") or DEFAULT_MAX_RESULTS
        records = await client.list_messages(api_key, gmail.get("id"), max_results)
        messages = normalize_messages(records)
        logger.info("Fetched %d email(s)", len(messages))
        return success_result(as_payload(messages, "emails"))

    return registry
