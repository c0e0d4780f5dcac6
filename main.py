# =============================================================================
# main.py  —  Entry Point for the Unipile MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (UNIPILE_DSN, UNIPILE_API_KEY, ...) with python-dotenv
#   2. Builds Settings; refuses to start (exit 1) without UNIPILE_DSN
#   3. Configures logging (STDERR only; STDOUT belongs to MCP)
#   4. Serves the tools over stdio until the host disconnects
#
# EXIT CODES:
#   0  host closed the stream normally
#   1  missing/invalid configuration, or the transport died
#
# Tool failures (bad key, Unipile down, no Gmail account) NEVER reach this
# level. They come back to the host as error results.
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

# Load environment variables from .env BEFORE reading settings.
# Variables already present in the real environment take precedence.
load_dotenv()

from core.config import load_settings
from core.errors import ConfigurationError
from tools.mcp_server import configure_logging, serve

logger = logging.getLogger("mcp")


def main() -> int:
    configure_logging()

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error(f"❌ {exc}")
        return 1

    logging.getLogger().setLevel(settings.log_level)

    try:
        serve(settings)
    except KeyboardInterrupt:
        return 0
    except Exception as exc:
        logger.error(f"❌ Fatal error: {exc}", exc_info=True)
        return 1
    return 0


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    sys.exit(main())
