# =============================================================================
# core/credentials.py  —  API Key Resolution
# =============================================================================
#
# Precedence, highest first:
#   1. The key the host sent with THIS call (InvocationContext)
#   2. UNIPILE_API_KEY from startup configuration
#
# The result is used for one call and then dropped; nothing is cached.
# =============================================================================

from core.config import Settings
from core.errors import CredentialMissingError
from core.models import InvocationContext


def resolve_api_key(context: InvocationContext | None, settings: Settings) -> str:
    """Pick the API key for a single tool invocation.

    Raises:
        CredentialMissingError: neither the context nor the settings have one.
    """
    if context is not None and context.credential_override:
        return context.credential_override
    if settings.default_api_key:
        return settings.default_api_key
    raise CredentialMissingError()
