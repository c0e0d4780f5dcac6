# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the *shape* of every piece of information that
# flows through the server.  None of them outlive a single tool call: they
# are rebuilt from Unipile's response every time.
#
# DESIGN PRINCIPLE — "Fixed Output Shape":
#   Unipile's JSON is inconsistent (missing fields, different envelopes).
#   The host should never have to cope with that.  Account and Message always
#   carry every field; core/normalizer.py fills the gaps with sentinels.
# =============================================================================

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

# Where the host puts a per-call credential inside the MCP request "_meta".
CREDENTIALS_NAMESPACE = "UNIPILE"


# -----------------------------------------------------------------------------
# InvocationContext — per-call data supplied by the host
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class InvocationContext:
    """Per-call data from the host.  Read-only, never persisted."""

    credential_override: str | None = None

    @classmethod
    def from_meta(cls, meta: Any) -> "InvocationContext":
        """Build a context from an MCP request ``_meta`` block.

        The host passes the credential as::

            {"selected_server_credentials": {"UNIPILE": {"accessToken": "..."}}}

        ``meta`` may be a plain dict or a pydantic model (depending on the
        MCP SDK version); anything else gives an empty context.
        """
        if meta is None:
            return cls()
        if hasattr(meta, "model_dump"):
            meta = meta.model_dump()
        if not isinstance(meta, Mapping):
            return cls()

        creds = meta.get("selected_server_credentials")
        server_creds = creds.get(CREDENTIALS_NAMESPACE) if isinstance(creds, Mapping) else None
        token = server_creds.get("accessToken") if isinstance(server_creds, Mapping) else None
        if isinstance(token, str) and token.strip():
            return cls(credential_override=token.strip())
        return cls()


# -----------------------------------------------------------------------------
# Account / Message — what the tools actually return
# -----------------------------------------------------------------------------
@dataclass
class Account:
    """A messaging account connected to Unipile (LinkedIn, Gmail, ...)."""

    id: str
    name: str
    email: str
    type: str
    provider: str
    status: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Message:
    """One email from the auto-detected Gmail account."""

    index: int                 # 1-based position in this batch, not from Unipile
    id: Any
    subject: str
    from_: Any                 # "from" is a keyword; renamed on output
    snippet: Any
    date: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "id": self.id,
            "subject": self.subject,
            "from": self.from_,
            "snippet": self.snippet,
            "date": self.date,
        }


# -----------------------------------------------------------------------------
# ToolResult — the ONLY thing a tool hands back to the host
# -----------------------------------------------------------------------------
@dataclass
class TextContent:
    text: str
    type: str = "text"


@dataclass
class ToolResult:
    """MCP-style tool output: ordered text items plus an error flag."""

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": [{"type": item.type, "text": item.text} for item in self.content],
            "isError": self.is_error,
        }


ToolHandler = Callable[[dict[str, Any], InvocationContext], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool.  Immutable once it is in the registry."""

    name: str
    description: str
    input_schema: dict[str, dict[str, Any]]
    handler: ToolHandler
    operation: str             # Used in failure text: "Failed to <operation>"

    @property
    def json_schema(self) -> dict[str, Any]:
        """Object schema advertised to hosts.

        Extra keys are allowed: arguments are passed through, never rejected.
        """
        return {"type": "object", "properties": self.input_schema}
