"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (hyrule_api.main) calls these services;
they don't handle HTTP, only catalog data and the Gemini call.

MODULES:
    catalog        - Catalog (read-only records) and load_catalog(path)
    lookup_service - list/search over a Catalog
    chat_relay     - ChatRelay: persona prompt + message -> Gemini -> reply text
"""
