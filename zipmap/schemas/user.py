from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel

from ..core.payload import clean_text


class UserInput(BaseModel):
    """Name/zip pair as submitted, trimmed, with blanks collapsed to ``None``."""

    name: Optional[str] = None
    zip: Optional[str] = None

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "UserInput":
        return cls(name=clean_text(body.get("name")), zip=clean_text(body.get("zip")))
