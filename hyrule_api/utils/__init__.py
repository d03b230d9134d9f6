"""
UTILITIES PACKAGE
=================

Helpers used by the services (no HTTP, no business logic):

  masking - mask_secret(key) / redact(text, key): keep the Gemini API key out of logs and errors.
"""
