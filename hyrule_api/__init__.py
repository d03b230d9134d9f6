"""
HYRULE CHAT API PACKAGE
=======================

  from hyrule_api.main import app
  from hyrule_api.models import Character, ChatRequest
  from hyrule_api.services.lookup_service import LookupService

FILE STRUCTURE:
  hyrule_api/
    __init__.py   - This file; marks 'hyrule_api' as a package.
    main.py       - FastAPI app, CORS layer and all HTTP endpoints.
    models.py     - Pydantic models for catalog records, chat bodies and Gemini replies.
    services/     - Catalog loading, lookups and the Gemini chat relay.
    utils/        - Helpers: masking the API key in logs and error messages.
    data/         - catalog.json, the seed characters and creators.
"""
