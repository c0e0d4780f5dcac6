"""
End-to-end tests for the two Unipile tools against a fake upstream.
"""

import json

import pytest

from core.errors import NotFoundError
from core.messaging import (
    GET_GMAIL_EMAILS_TOOL,
    LIST_ACCOUNTS_TOOL,
    build_registry,
    find_gmail_account,
)
from core.models import InvocationContext


# -----------------------------------------------------------------------------
# Gmail auto-detection
# -----------------------------------------------------------------------------
def test_find_gmail_account_needs_both_conditions(sample_accounts):
    assert find_gmail_account(sample_accounts)["id"] == "gmail-1"


@pytest.mark.parametrize("records", [
    [],
    [{"id": "1", "email": "me@gmail.com", "type": "MAIL"}],
    [{"id": "2", "email": "me@outlook.com", "type": "GOOGLE_OAUTH"}],
    [{"id": "3", "type": "GOOGLE_OAUTH"}],
    [{"id": "4", "email": None, "type": "GOOGLE_OAUTH"}],
])
def test_find_gmail_account_not_found(records):
    with pytest.raises(NotFoundError, match="No Gmail-compatible account"):
        find_gmail_account(records)


# -----------------------------------------------------------------------------
# unipile_list_all_accounts
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_list_accounts(registry, fake_unipile):
    fake_unipile.reply("/accounts", {"items": [
        {"id": "a1", "name": "Alex", "email": "alex@gmail.com", "type": "GOOGLE_OAUTH",
         "provider": "GOOGLE", "status": "OK"},
        {"id": "a2", "label": "Work", "type": "LINKEDIN"},
    ]})

    result = await registry.invoke(LIST_ACCOUNTS_TOOL)

    assert not result.is_error
    assert json.loads(result.text) == [
        {"id": "a1", "name": "Alex", "email": "alex@gmail.com", "type": "GOOGLE_OAUTH",
         "provider": "GOOGLE", "status": "OK"},
        {"id": "a2", "name": "Work", "email": "N/A", "type": "LINKEDIN",
         "provider": "Unknown", "status": "Unknown"},
    ]


@pytest.mark.asyncio
async def test_list_accounts_empty(registry, fake_unipile):
    fake_unipile.reply("/accounts", {"items": []})

    result = await registry.invoke(LIST_ACCOUNTS_TOOL)

    assert not result.is_error
    assert json.loads(result.text) == {"message": "No accounts found."}


@pytest.mark.asyncio
async def test_list_accounts_is_repeatable(registry, fake_unipile, sample_accounts):
    fake_unipile.reply("/accounts", {"accounts": sample_accounts})

    first = await registry.invoke(LIST_ACCOUNTS_TOOL)
    second = await registry.invoke(LIST_ACCOUNTS_TOOL)

    assert json.loads(first.text) == json.loads(second.text)
    assert len(fake_unipile.requests) == 2


@pytest.mark.asyncio
async def test_context_key_takes_precedence(registry, fake_unipile):
    fake_unipile.reply("/accounts", {"items": []})

    await registry.invoke(LIST_ACCOUNTS_TOOL, {}, InvocationContext(credential_override="payload-key"))
    await registry.invoke(LIST_ACCOUNTS_TOOL, {}, InvocationContext())

    assert fake_unipile.api_keys == ["payload-key", "default-key"]


@pytest.mark.asyncio
async def test_upstream_500(registry, fake_unipile):
    fake_unipile.reply("/accounts", {"message": "server exploded"}, status=500)

    result = await registry.invoke(LIST_ACCOUNTS_TOOL)

    assert result.is_error
    assert "Status: 500" in result.text
    assert "server exploded" in result.text
    assert result.text.startswith("❌ Failed to list accounts")


@pytest.mark.asyncio
async def test_missing_credential_makes_no_http_call(keyless_settings, client, fake_unipile):
    registry = build_registry(keyless_settings, client)

    for name in (LIST_ACCOUNTS_TOOL, GET_GMAIL_EMAILS_TOOL):
        result = await registry.invoke(name)
        assert result.is_error
        assert result.text == "❌ Missing Unipile API Key (set in .env or payload)"

    assert fake_unipile.requests == []


# -----------------------------------------------------------------------------
# unipile_get_gmail_emails
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_get_gmail_emails(registry, fake_unipile, sample_accounts):
    fake_unipile.reply("/accounts", {"items": sample_accounts})
    fake_unipile.reply("/accounts/gmail-1/messages", {"items": [
        {"id": "m1", "subject": "Hello", "from": "bob@example.com", "snippet": "Hi there", "date": "2026-10-01"},
        {"id": "m2", "from": "eve@example.com", "snippet": "...", "date": "2026-10-02"},
    ]})

    result = await registry.invoke(GET_GMAIL_EMAILS_TOOL, {"maxResults": 2})

    assert not result.is_error
    assert json.loads(result.text) == [
        {"index": 1, "id": "m1", "subject": "Hello", "from": "bob@example.com",
         "snippet": "Hi there", "date": "2026-10-01"},
        {"index": 2, "id": "m2", "subject": "(no subject)", "from": "eve@example.com",
         "snippet": "...", "date": "2026-10-02"},
    ]
    assert fake_unipile.paths == ["/accounts", "/accounts/gmail-1/messages"]
    assert fake_unipile.requests[1].url.params["maxResults"] == "2"


@pytest.mark.asyncio
@pytest.mark.parametrize("arguments", [{}, {"maxResults": None}, {"maxResults": 0}])
async def test_get_gmail_emails_default_max_results(registry, fake_unipile, sample_accounts, arguments):
    fake_unipile.reply("/accounts", {"items": sample_accounts})
    fake_unipile.reply("/accounts/gmail-1/messages", {"messages": []})

    result = await registry.invoke(GET_GMAIL_EMAILS_TOOL, arguments)

    assert json.loads(result.text) == {"message": "No emails found."}
    assert fake_unipile.requests[1].url.params["maxResults"] == "10"


@pytest.mark.asyncio
async def test_no_gmail_account_short_circuits(registry, fake_unipile):
    fake_unipile.reply("/accounts", {"items": [
        {"id": "li-1", "type": "LINKEDIN"},
        {"id": "mail-1", "email": "me@gmail.com", "type": "MAIL"},
    ]})

    result = await registry.invoke(GET_GMAIL_EMAILS_TOOL)

    assert result.is_error
    assert result.text == "❌ No Gmail-compatible account found (GOOGLE_OAUTH type)."
    assert fake_unipile.paths == ["/accounts"]


@pytest.mark.asyncio
async def test_messages_failure_reports_fetch_emails(registry, fake_unipile, sample_accounts):
    fake_unipile.reply("/accounts", {"items": sample_accounts})
    fake_unipile.reply("/accounts/gmail-1/messages", {"message": "token expired"}, status=401)

    result = await registry.invoke(GET_GMAIL_EMAILS_TOOL)

    assert result.is_error
    assert result.text == "❌ Failed to fetch emails (Status: 401): token expired"


def test_registry_exposes_both_tools(registry):
    assert registry.names() == [LIST_ACCOUNTS_TOOL, GET_GMAIL_EMAILS_TOOL]
    schema = registry.get(GET_GMAIL_EMAILS_TOOL).input_schema
    assert schema["maxResults"]["default"] == 10
