"""
CHAT RELAY SERVICE MODULE
=========================

Forwards one user message to Gemini's generateContent endpoint and returns the
character's reply. Used by POST /chat.

FLOW:
  1. build_payload(message): persona prompt + message, wrapped in Gemini's
     {"contents": [{"parts": [{"text": ...}]}]} shape.
  2. chat(message): one synchronous POST with the API key as the `key` query
     parameter and an explicit timeout; wait for the whole body.
  3. Take the first text part of the first candidate; if Gemini returned no
     candidates (or no parts), reply with FALLBACK_REPLY.

ERRORS:
  Every failure raises a ChatRelayError subclass with a message that is safe to
  return to the caller (the API key is masked). Nothing is retried: one /chat
  request makes at most one outbound call.
"""

import json
import logging
from typing import Any, Dict

import requests
from pydantic import ValidationError

from hyrule_api.models import GeminiResponse
from hyrule_api.utils.masking import mask_secret, redact

logger = logging.getLogger("HYRULE")

FALLBACK_REPLY = "No reply"

# ==============================================================================
# ERRORS
# ==============================================================================

class ConfigurationError(Exception):
    """The relay cannot be built (e.g. GEMINI_API_KEY is not set)."""


class ChatRelayError(Exception):
    """Base class for failures while relaying a message to Gemini."""


class PayloadError(ChatRelayError):
    """The outbound request body could not be serialized."""


class UpstreamUnavailableError(ChatRelayError):
    """Gemini could not be reached (connection error, timeout)."""


class UpstreamStatusError(ChatRelayError):
    """Gemini answered with a non-success HTTP status."""

    def __init__(self, status_code: int, reason: str, body: str):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"Gemini API error: {status_code} {reason}, body: {body}")


class UpstreamResponseError(ChatRelayError):
    """Gemini's response body could not be read or decoded."""

# ==============================================================================
# CHAT RELAY CLASS
# ==============================================================================

class ChatRelay:
    """
    One configured connection to a Gemini model. Stateless between calls, so a
    single instance is shared by all /chat requests.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        persona_prompt: str,
        timeout: float = 20.0,
    ):
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.persona_prompt = persona_prompt
        self.timeout = timeout
        logger.info("Chat relay ready (model=%s, key=%s, timeout=%.1fs)", model, mask_secret(api_key), timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, message: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": self.persona_prompt + message}]}]}

    def chat(self, message: str) -> str:
        """Send message to Gemini and return the reply text (or FALLBACK_REPLY)."""
        try:
            body = json.dumps(self.build_payload(message))
        except (TypeError, ValueError) as e:
            logger.error("Could not serialize Gemini payload: %s", e)
            raise PayloadError("Failed to marshal request") from e

        logger.info("Sending message to Gemini (model=%s, key=%s)", self.model, mask_secret(self.api_key))
        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error("Gemini request timed out after %.1fs: %s", self.timeout, redact(str(e), self.api_key))
            raise UpstreamUnavailableError("Timed out contacting Gemini API") from e
        except requests.exceptions.RequestException as e:
            logger.error("Could not reach Gemini: %s", redact(str(e), self.api_key))
            raise UpstreamUnavailableError("Failed to contact Gemini API") from e

        if not 200 <= response.status_code < 300:
            text = redact(response.text, self.api_key)
            logger.error("Gemini returned %s %s", response.status_code, response.reason)
            raise UpstreamStatusError(response.status_code, response.reason or "", text)

        try:
            logger.debug("Gemini response body: %s", response.text)
            decoded = GeminiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("Could not parse Gemini response: %s", e)
            raise UpstreamResponseError("Failed to parse Gemini response") from e

        reply = decoded.first_text()
        if reply is None:
            logger.warning("Gemini returned no candidates; replying with fallback")
            return FALLBACK_REPLY
        return reply
