from __future__ import annotations

import re
from typing import Any, Mapping

ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")

NAME_REQUIRED = "Name is required and must be a non-empty string."
ZIP_REQUIRED = "Zip code is required and must be a non-empty string."
ZIP_FORMAT = "Zip code must be 5 digits or ZIP+4 format (12345 or 12345-6789)."


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def zip_format_errors(zip_code: Any) -> list[str]:
    text = _as_text(zip_code)
    if not text:
        return [ZIP_REQUIRED]
    if not ZIP_PATTERN.match(text):
        return [ZIP_FORMAT]
    return []


def validate_user(candidate: Mapping[str, Any]) -> list[str]:
    """Return every rule the candidate breaks; an empty list means valid."""
    errors: list[str] = []
    if not _as_text(candidate.get("name")):
        errors.append(NAME_REQUIRED)
    errors.extend(zip_format_errors(candidate.get("zip")))
    return errors


def zip5(zip_code: str) -> str:
    """The geocoding key: the five digits before any ``-NNNN`` suffix."""
    return zip_code.split("-", 1)[0]
