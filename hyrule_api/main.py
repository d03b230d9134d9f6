"""
HYRULE CHAT API
===============

This module defines the FastAPI application and all HTTP endpoints.

ENDPOINTS:
  GET  /                   - Returns API name and list of endpoints.
  GET  /health             - Returns which services are ready (for monitoring).
  GET  /characters         - All catalog characters, in catalog order.
  GET  /characters/search  - Characters whose name contains ?q= (case-insensitive).
  GET  /creators           - All catalog creators, in catalog order.
  POST /chat               - Relays {"message": ...} to Gemini as Link and returns {"reply": ...}.

CORS:
  Every response carries permissive CORS headers, and any OPTIONS request is
  answered with an empty 204 before it reaches a route.

STARTUP:
  The lifespan function loads the catalog, builds the LookupService and, if
  GEMINI_API_KEY is set, the ChatRelay. Without a key the server still starts;
  /chat then answers 503 instead of calling Gemini.
"""


from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from contextlib import asynccontextmanager
from typing import List, Optional
import uvicorn
import logging

from hyrule_api.models import Character, ChatRequest, ChatResponse, Creator
from hyrule_api.services.catalog import load_catalog
from hyrule_api.services.chat_relay import ChatRelay, ChatRelayError, ConfigurationError
from hyrule_api.services.lookup_service import LookupService
from config import (
    CATALOG_PATH,
    GEMINI_API_BASE_URL,
    GEMINI_API_KEY,
    GEMINI_MODEL,
    GEMINI_TIMEOUT_SECONDS,
    PERSONA_PROMPT,
    SERVER_HOST,
    SERVER_PORT,
)


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("HYRULE")


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

CHAT_UNAVAILABLE_MESSAGE = "Chat service unavailable: GEMINI_API_KEY is not set"


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the services once and keep them on app.state:
      1. Catalog: read from CATALOG_PATH (a broken catalog stops startup).
      2. LookupService: wraps the catalog.
      3. ChatRelay: needs GEMINI_API_KEY. If it is missing we log a warning and
         leave chat_relay as None, so only /chat is affected.
    """
    logger.info("=" * 60)
    logger.info("Hyrule Chat API - Starting Up...")
    logger.info("=" * 60)

    try:
        catalog = load_catalog(CATALOG_PATH)
        app.state.catalog = catalog
        app.state.lookup_service = LookupService(catalog)
        logger.info("Lookup service initialized successfully")
    except Exception as e:
        logger.error(f"Fatal error during startup: {e}", exc_info=True)
        raise

    try:
        app.state.chat_relay = ChatRelay(
            api_key=GEMINI_API_KEY,
            model=GEMINI_MODEL,
            base_url=GEMINI_API_BASE_URL,
            persona_prompt=PERSONA_PROMPT,
            timeout=GEMINI_TIMEOUT_SECONDS,
        )
    except ConfigurationError as e:
        app.state.chat_relay = None
        logger.warning(f"{e}. POST /chat will answer 503 until the key is configured.")

    logger.info("=" * 60)
    logger.info("Service Status:")
    logger.info("    - Catalog: Ready")
    logger.info("    - Lookup Service: Ready")
    logger.info(f"    - Chat Relay: {'Ready' if app.state.chat_relay else 'Disabled'}")
    logger.info("=" * 60)
    logger.info(f"API: http://localhost:{SERVER_PORT}")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Hyrule Chat API. Goodbye!")


# -------------------------------------------------------------------------
# FASTAPI APP AND CORS
# -------------------------------------------------------------------------
app = FastAPI(
    title="Hyrule Chat API",
    description="Zelda character lookups and a chat relay to Gemini",
    lifespan=lifespan
)


# Not Starlette's CORSMiddleware: it only answers requests that carry an Origin
# header and replies 200 to preflights; here every response needs the headers
# and every OPTIONS gets an empty 204.
@app.middleware("http")
async def cors(request: Request, call_next):
    """Answer preflight requests directly; add the CORS headers to everything else."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"}, headers=CORS_HEADERS)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    """Malformed JSON or a body that is not a ChatRequest: 400, handler never runs."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


# -------------------------------------------------------------------------
# DEPENDENCIES
# -------------------------------------------------------------------------
# Route handlers get their services through these, so tests can swap them with
# app.dependency_overrides.

def get_lookup_service(request: Request) -> LookupService:
    service = getattr(request.app.state, "lookup_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Lookup service not initialized")
    return service


def get_chat_relay(request: Request) -> Optional[ChatRelay]:
    return getattr(request.app.state, "chat_relay", None)


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint (for discovery)."""
    return {
        "message": "Hyrule Chat API",
        "endpoints": {
            "/characters": "List all characters",
            "/characters/search?q=": "Search characters by name (case-insensitive)",
            "/creators": "List all creators",
            "/chat": "Talk to Link (relayed to Gemini)",
            "/health": "System health check"
        }
    }


@app.get("/health")
async def health(request: Request):
    """Return 'healthy' and whether each service is initialized."""
    state = request.app.state
    return {
        "status": "healthy",
        "catalog": getattr(state, "catalog", None) is not None,
        "lookup_service": getattr(state, "lookup_service", None) is not None,
        "chat_relay": getattr(state, "chat_relay", None) is not None
    }


@app.get("/characters", response_model=List[Character])
def get_characters(lookup: LookupService = Depends(get_lookup_service)):
    return lookup.list_characters()


@app.get("/characters/search", response_model=List[Character])
def search_characters(q: str = "", lookup: LookupService = Depends(get_lookup_service)):
    """Characters whose name contains q, ignoring case. No q (or q=) returns every character."""
    return lookup.search_characters(q)


@app.get("/creators", response_model=List[Creator])
def get_creators(lookup: LookupService = Depends(get_lookup_service)):
    return lookup.list_creators()


@app.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest, relay: Optional[ChatRelay] = Depends(get_chat_relay)):
    """
    Chat with Link.

    The message is placed after the persona prompt and sent to Gemini in a single
    call (declared sync so FastAPI runs it in its thread pool while it waits).

    REQUEST BODY:
    {
        "message": "Hello"
    }

    RESPONSE:
    {
        "reply": "Greetings, traveler..."
    }

    ERRORS:
      400 - body is not valid JSON or has no string "message".
      500 - Gemini could not be reached, timed out, returned a non-2xx status
            (status and body are in the detail) or sent an unreadable reply.
      503 - GEMINI_API_KEY was not set at startup.
    """
    if relay is None:
        raise HTTPException(status_code=503, detail=CHAT_UNAVAILABLE_MESSAGE)

    try:
        reply = relay.chat(request.message)
    except ChatRelayError as e:
        logger.error(f"Error processing chat: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing chat: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error processing chat: {str(e)}")
    return ChatResponse(reply=reply)


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m hyrule_api.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m hyrule_api.main"""
    uvicorn.run(
        "hyrule_api.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        log_level="info"
    )

if __name__ == "__main__":
    run()
