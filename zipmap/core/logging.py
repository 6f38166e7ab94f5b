from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from ..middlewares.request_id import request_id_ctx_var

# Both providers take their key as a query parameter, so request URLs that end
# up in exception text would otherwise leak it.
_SECRET_PARAM_RE = re.compile(r"(?i)\b(appid|apikey)=[^&\s\"']+")


def redact_secrets(text: str) -> str:
    return _SECRET_PARAM_RE.sub(lambda m: f"{m.group(1)}=***", text)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line, tagged with the service and request id."""

    def __init__(self, service: str = "ZipMap", environment: str = "dev") -> None:
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "service": self.service,
            "env": self.environment,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }
        request_id = request_id_ctx_var.get()
        if request_id:
            payload["request_id"] = request_id
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            payload.update(extra)
        if record.exc_info:
            payload["exception"] = redact_secrets(self.formatException(record.exc_info))
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(level: str = "INFO", *, service: str = "ZipMap", environment: str = "dev") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(service=service, environment=environment))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # httpx logs every request URL (key included) at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
