"""Configuration from environment."""

import os

CHARACTER_LIMIT = 200_000

# ELK can hang for minutes under the runtime; fail fast instead
RENDER_TIMEOUT_MS = int(os.environ.get("D2_RENDER_TIMEOUT_MS", "30000"))

CANCEL_ON_TIMEOUT = os.environ.get("D2_CANCEL_ON_TIMEOUT", "").lower() in ("1", "true", "yes")

LOG_LEVEL = os.environ.get("D2_MCP_LOG_LEVEL", "INFO")


def d2_path() -> str:
    """Return the d2 executable, honouring ``D2_PATH`` at call time."""
    return os.environ.get("D2_PATH") or "d2"


def warmup_enabled() -> bool:
    return os.environ.get("D2_MCP_WARMUP", "1").lower() not in ("0", "false", "no")
