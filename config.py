"""
CONFIGURATION MODULE
====================

PURPOSE:
  Central place for all Hyrule Chat API settings: the Gemini API key, model and
  endpoint, the outbound timeout, the persona prompt, the catalog file and the
  listening address.

WHAT THIS FILE DOES:
  - Loads environment variables from .env (so the API key stays out of code).
  - Exposes GEMINI_API_KEY, GEMINI_MODEL, GEMINI_API_BASE_URL and GEMINI_TIMEOUT_SECONDS
    for the chat relay.
  - Holds the persona prompt placed in front of every user message sent to Gemini.
  - Points CATALOG_PATH at the bundled character/creator seed file.

USAGE:
  Import what you need: `from config import GEMINI_API_KEY, PERSONA_PROMPT`
  The application builds its services from these values at startup.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
# Used when a setting in the environment cannot be parsed.
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------
# Load environment variables from .env file (if it exists).
# A missing .env is fine: values then come from the process environment only.
load_dotenv()


# -----------------------------------------------------------------------------
# BASE PATH
# -----------------------------------------------------------------------------
# Points to the folder containing this file (the project root).
BASE_DIR = Path(__file__).parent


def _float_from_env(name: str, default: float) -> float:
    """Read a positive float from the environment; fall back to default (with a warning) if unusable."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s must be positive, using default %s", name, default)
        return default
    return value


# ============================================================================
# GEMINI API CONFIGURATION
# ============================================================================
# Gemini is the generative-language API behind POST /chat.
# The key is sent as the `key` query parameter on every call. If it is not set,
# the server still starts and serves the catalog; /chat answers 503.

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-pro")
GEMINI_API_BASE_URL = os.getenv(
    "GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1"
).rstrip("/")

# Seconds to wait for Gemini before giving up on a single /chat request.
GEMINI_TIMEOUT_SECONDS = _float_from_env("GEMINI_TIMEOUT_SECONDS", 20.0)

# ============================================================================
# PERSONA CONFIGURATION
# ============================================================================
# Prefix placed in front of the user's message before it is sent to Gemini.
# It ends with "User: " so the message reads as the user's line in the scene.

_DEFAULT_PERSONA_PROMPT = (
    "You are Link from The Legend of Zelda: Breath of the Wild. "
    "Speak courageously, concisely, and with a heroic tone. "
    "Avoid modern slang and stay true to the character's personality. User: "
)

PERSONA_PROMPT = os.getenv("PERSONA_PROMPT") or _DEFAULT_PERSONA_PROMPT

# ============================================================================
# CATALOG
# ============================================================================
# JSON file with the fixed character and creator records, read once at startup.

CATALOG_PATH = Path(
    os.getenv("CATALOG_PATH", "") or BASE_DIR / "hyrule_api" / "data" / "catalog.json"
)

# ============================================================================
# SERVER
# ============================================================================

SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8080"))
