"""
RUN SCRIPT - Start the Hyrule Chat API server
=============================================

PURPOSE:
  Single entry point to start the backend.

WHAT IT DOES:
  - Imports the FastAPI app from hyrule_api.main.
  - Runs it with uvicorn on SERVER_HOST (default 0.0.0.0) and SERVER_PORT (default 8080).

USAGE:
  python run.py

  Then try http://localhost:8080/characters in the browser, or chat with
  python chat_client.py.

NOTE:
  Set GEMINI_API_KEY in .env (or the environment) before running, otherwise
  POST /chat answers 503. The catalog endpoints work either way.
"""

import uvicorn

from config import SERVER_HOST, SERVER_PORT

# ------------------------------------------------------------------------------
# ENTRY POINT
# ------------------------------------------------------------------------------
# Only run uvicorn when this file is executed directly (python run.py),
# not when it is imported by another module.
if __name__ == "__main__":
    uvicorn.run(
        "hyrule_api.main:app",   # String path to the FastAPI app instance (module:variable).
        host=SERVER_HOST,        # 0.0.0.0 listens on all network interfaces.
        port=SERVER_PORT,        # 8080 unless SERVER_PORT says otherwise.
        reload=True              # Auto-restart when .py files change (useful during development).
    )
