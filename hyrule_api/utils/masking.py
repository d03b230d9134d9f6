"""
SECRET MASKING UTILITY
======================

The Gemini API key travels in the request URL, so it can show up in exception
text from requests. These helpers keep it out of logs and error responses.
"""


def mask_secret(secret: str) -> str:
    """Return a short, loggable form of a secret, e.g. 'AIza...9xQz'."""
    if not secret:
        return "<unset>"
    if len(secret) <= 8:
        return "*" * len(secret)
    return f"{secret[:4]}...{secret[-4:]}"


def redact(text: str, secret: str) -> str:
    """Replace every occurrence of secret in text with its masked form."""
    if not secret:
        return text
    return text.replace(secret, mask_secret(secret))
