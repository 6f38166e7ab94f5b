"""Request body decoding that never fails.

Bodies arrive absent, as JSON text, or base64-encoded when an API gateway
forwards a binary-flagged event. Anything that does not decode to a JSON object
is treated as an empty object so that validation reports the missing fields.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Mapping

from fastapi import Request

logger = logging.getLogger(__name__)

BASE64_ENCODING_HEADER = "content-transfer-encoding"


def parse_body(raw: bytes | str | Mapping[str, Any] | None, *, is_base64: bool = False) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        if is_base64:
            raw = base64.b64decode(raw, validate=False)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        if not raw.strip():
            return {}
        data = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        logger.info("Ignoring undecodable request body: %s", exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


async def read_json_body(request: Request) -> dict[str, Any]:
    encoding = (request.headers.get(BASE64_ENCODING_HEADER) or "").strip().lower()
    raw = await request.body()
    return parse_body(raw, is_base64=encoding == "base64")


def clean_text(value: Any) -> str | None:
    """Trim a string field; ``None`` and blank strings count as absent."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
