"""Reading the Supabase session the web client stores in cookies."""
from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any, List, Mapping, Optional
from urllib.parse import unquote

logger = logging.getLogger(__name__)

BASE64_PREFIX = "base64-"
_CHUNK_SUFFIX = re.compile(r"^\.(\d+)$")


def session_cookie_names(cookies: Mapping[str, str], cookie_name: Optional[str]) -> List[str]:
    """Names of the cookie (or its ``.0``, ``.1`` … chunks) that hold the session.

    Chunks are returned in index order and stop at the first gap.
    """
    if not cookie_name:
        return []
    if cookie_name in cookies:
        return [cookie_name]

    chunks = {}
    for name in cookies:
        if not name.startswith(cookie_name):
            continue
        match = _CHUNK_SUFFIX.match(name[len(cookie_name):])
        if match:
            chunks[int(match.group(1))] = name

    names = []
    index = 0
    while index in chunks:
        names.append(chunks[index])
        index += 1
    return names


def _decode_base64url(value: str) -> str:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")


def read_session(cookies: Mapping[str, str], cookie_name: Optional[str]) -> Optional[Any]:
    """Decoded JSON session stored under ``cookie_name``; None when absent or unreadable."""
    names = session_cookie_names(cookies, cookie_name)
    if not names:
        return None

    raw = "".join(cookies[name] for name in names)
    try:
        if raw.startswith(BASE64_PREFIX):
            raw = _decode_base64url(raw[len(BASE64_PREFIX):])
        elif raw.startswith("%"):
            raw = unquote(raw)
        return json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.warning("Unreadable session cookie %s", cookie_name)
        return None


def extract_access_token(cookies: Mapping[str, str], cookie_name: Optional[str]) -> Optional[str]:
    session = read_session(cookies, cookie_name)
    if isinstance(session, dict):
        token = session.get("access_token")
        if not token and isinstance(session.get("currentSession"), dict):
            token = session["currentSession"].get("access_token")
    elif isinstance(session, list) and session:
        # Older auth helpers stored [access_token, refresh_token, ...].
        token = session[0]
    else:
        token = None
    return token if isinstance(token, str) and token else None
