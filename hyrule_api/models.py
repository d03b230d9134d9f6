"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for the catalog records, the chat
API bodies and the decoded Gemini response. FastAPI uses them to validate
incoming JSON and to serialize responses.

MODELS:
  Character       - One catalog character (id, name, description). Immutable.
  Creator         - One catalog creator (id, name, role). Immutable.
  ChatRequest     - Body of POST /chat (message).
  ChatResponse    - Body returned by POST /chat (reply).
  GeminiResponse  - The parts of Gemini's generateContent reply we read.
"""

from pydantic import BaseModel, ConfigDict
from typing import List, Optional

# ==============================================================================
# CATALOG RECORDS
# ==============================================================================

class Character(BaseModel):
    """A character from the static catalog. Frozen: the catalog has no writers."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str

class Creator(BaseModel):
    """A creator from the static catalog. Frozen like Character."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    role: str

# ==============================================================================
# CHAT REQUEST/RESPONSE MODELS
# ==============================================================================

class ChatRequest(BaseModel):
    """
    Request body for POST /chat.

    - message: Required. The text relayed to Gemini after the persona prompt.
      A missing field or a non-string value is rejected with 400.
    """
    message: str

class ChatResponse(BaseModel):
    """Response body for POST /chat: the character's reply text."""
    reply: str

# ==============================================================================
# GEMINI RESPONSE (generateContent)
# ==============================================================================
# Every level may be absent in a real reply (e.g. a blocked prompt has no
# candidates), so everything is optional. Unknown keys are ignored.

class GeminiPart(BaseModel):
    text: Optional[str] = None

class GeminiContent(BaseModel):
    parts: Optional[List[GeminiPart]] = None

class GeminiCandidate(BaseModel):
    content: Optional[GeminiContent] = None

class GeminiResponse(BaseModel):
    candidates: Optional[List[GeminiCandidate]] = None

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, or None if there is none."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text or ""
