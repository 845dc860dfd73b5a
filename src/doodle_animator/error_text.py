"""
Error Text Extraction
=====================

Best-effort extraction of a readable message from remote error strings.

The generation SDK tends to wrap the useful part of an error in a prefix
or a nested JSON body. This module peels those layers off for the status
line shown to users. It never raises: if nothing matches, the input comes
back with a leading ``Error:`` removed.
"""

import json
import re


_SDK_PREFIX = re.compile(r"\[GoogleGenerativeAI Error\]:\s*(.*)", re.DOTALL)
_GENERIC_BODY = re.compile(r'\{"error":(.*)\}', re.DOTALL)
_ERROR_PREFIX = re.compile(r"^Error:\s*")


def _message_from_json(detail: str):
    try:
        payload = json.loads(detail)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    inner = payload.get("error")
    if isinstance(inner, dict) and inner.get("message"):
        return inner["message"]
    return payload.get("message")


def parse_error_message(error: str) -> str:
    """
    Extract the human-readable part of an error string.

    Order of attempts:
        1. ``[GoogleGenerativeAI Error]: <detail>``; a JSON detail yields
           ``error.message`` or ``message``, anything else the raw detail
        2. A generic ``{"error": {...}}`` body yields its ``message``
        3. The original string without a leading ``Error:``

    Args:
        error: Raw error text

    Returns:
        Message suitable for a status line
    """
    match = _SDK_PREFIX.search(error)
    if match and match.group(1).strip():
        detail = match.group(1).strip()
        if detail.startswith("{") and detail.endswith("}"):
            return _message_from_json(detail) or detail
        return detail

    match = _GENERIC_BODY.search(error)
    if match:
        try:
            inner = json.loads(match.group(1))
        except ValueError:
            inner = None
        if isinstance(inner, dict) and inner.get("message"):
            return inner["message"]

    return _ERROR_PREFIX.sub("", error)
