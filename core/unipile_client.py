# =============================================================================
# core/unipile_client.py  —  Unipile HTTP Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Performs the two authenticated GET calls the tools need and pulls the
#   list of records out of Unipile's response envelope.
#
#     GET {base}/accounts                                   → accounts
#     GET {base}/accounts/{id}/messages?maxResults=N        → messages
#
# ENVELOPE LOOKUP:
#   Unipile is not consistent about where it puts the list:
#       {"items": [...]}   {"accounts": [...]}   {"data": [...]}
#   Instead of a chain of `or`s we keep an ordered tuple of envelope keys and
#   try them in order.  Supporting a new envelope = adding a string.
#
#   If nothing matches (or the match is not a list) we return []; the tool
#   then reports "No ... found." instead of failing.
#
# FAILURES:
#   Any non-2xx response or transport error becomes an UpstreamError with a
#   status (or None) and the best message we can find.  No retries: one
#   failed call ends the tool invocation.
# =============================================================================

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from core.config import Settings
from core.errors import UpstreamError

logger = logging.getLogger(__name__)

ACCOUNT_ENVELOPE_KEYS: tuple[str, ...] = ("items", "accounts", "data")
MESSAGE_ENVELOPE_KEYS: tuple[str, ...] = ("items", "messages", "data")


def extract_records(body: Any, keys: Sequence[str]) -> list[dict[str, Any]]:
    """Return the record list from an envelope, trying ``keys`` in order.

    The first key that is set wins, even when it holds an empty list.  Null,
    false, 0 and "" count as unset.  A winner that is not a list yields []
    rather than falling through to the next key.  Entries that are not
    objects are dropped with a warning.
    """
    if not isinstance(body, dict):
        return []
    for key in keys:
        value = body.get(key)
        if not _is_set(value):
            continue
        if not isinstance(value, list):
            return []
        records = [record for record in value if isinstance(record, dict)]
        if len(records) < len(value):
            logger.warning(
                "Dropped %d non-object entries from %r", len(value) - len(records), key
            )
        return records
    return []


def _is_set(value: Any) -> bool:
    return isinstance(value, (list, dict)) or bool(value)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed with status code {response.status_code}"


class UnipileClient:
    """Thin async wrapper over the Unipile REST API.

    Args:
        settings: Startup configuration (base URL, timeout).
        transport: Optional httpx transport.  Tests pass httpx.MockTransport.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    async def _get(self, api_key: str, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._settings.base_url}{path}"
        headers = {
            "x-api-key": api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.warning("GET %s failed: %s", path, exc)
            raise UpstreamError(None, str(exc) or "Unknown error") from exc

        logger.debug("GET %s → %s", path, response.status_code)

        if not response.is_success:
            raise UpstreamError(response.status_code, _error_message(response))

        try:
            return response.json()
        except ValueError:
            # 2xx with a non-JSON body: treat as an empty envelope
            logger.warning("GET %s returned a non-JSON body", path)
            return None

    async def list_accounts(self, api_key: str) -> list[dict[str, Any]]:
        """Fetch every account connected to this Unipile workspace."""
        body = await self._get(api_key, "/accounts")
        return extract_records(body, ACCOUNT_ENVELOPE_KEYS)

    async def list_messages(
        self, api_key: str, account_id: str, max_results: Any = 10
    ) -> list[dict[str, Any]]:
        """Fetch recent messages for one account.

        ``max_results`` is forwarded as-is; Unipile validates it.
        """
        body = await self._get(
            api_key,
            f"/accounts/{account_id}/messages",
            params={"maxResults": max_results},
        )
        return extract_records(body, MESSAGE_ENVELOPE_KEYS)
