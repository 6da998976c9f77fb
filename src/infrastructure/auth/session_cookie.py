"""Access token extraction from Supabase SSR session cookies.

``@supabase/ssr`` stores the whole session in one cookie, split into
``<name>.0``, ``<name>.1`` … chunks once it outgrows the browser limit.
The value is either ``base64-`` followed by base64url-encoded JSON, plain
JSON, or (for older clients and hand-set cookies) the bare access token.
"""

import base64
import binascii
import json
from typing import Any, Mapping, Optional

BASE64_PREFIX = "base64-"


def join_cookie_chunks(cookies: Mapping[str, str], name: str) -> Optional[str]:
    """Return the cookie value, reassembling ``<name>.N`` chunks in order."""
    if name in cookies:
        return cookies[name]

    chunks: list[str] = []
    index = 0
    while f"{name}.{index}" in cookies:
        chunks.append(cookies[f"{name}.{index}"])
        index += 1

    return "".join(chunks) if chunks else None


def _decode_base64(value: str) -> Optional[str]:
    padded = value + "=" * (-len(value) % 4)
    try:
        return base64.urlsafe_b64decode(padded).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None


def _token_from_session(session: Any) -> Optional[str]:
    if isinstance(session, dict):
        token = session.get("access_token")
        return token if isinstance(token, str) and token else None
    # Legacy array format: [access_token, refresh_token, ...]
    if isinstance(session, list) and session and isinstance(session[0], str):
        return session[0] or None
    return None


def extract_access_token(raw: Optional[str]) -> Optional[str]:
    """Pull the access token out of a session cookie value.

    Returns None when the value is empty or cannot be decoded; the caller
    treats that the same as a missing cookie.
    """
    if not raw:
        return None

    value = raw.strip()
    if value.startswith(BASE64_PREFIX):
        decoded = _decode_base64(value[len(BASE64_PREFIX):])
        if decoded is None:
            return None
        value = decoded

    if value.startswith(("{", "[")):
        try:
            return _token_from_session(json.loads(value))
        except ValueError:
            return None

    # A bare JWT has exactly three dot-separated segments
    return value if value.count(".") == 2 else None


def access_token_from_cookies(cookies: Mapping[str, str], name: str) -> Optional[str]:
    """Read the named (possibly chunked) session cookie and return its token."""
    return extract_access_token(join_cookie_chunks(cookies, name))
