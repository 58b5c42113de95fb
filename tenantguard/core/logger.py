"""
JSON logging for tenantguard.

Every record is one JSON object on stderr. Security events (logins, provisioning,
purges, gate rejections) add who and where: user_id, tenant_id, action, result and
an optional meta dict. Passwords, hashes and tokens are never passed in.
"""
import logging
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from tenantguard.core.config import settings

logger = logging.getLogger("tenantguard")
logger.setLevel(settings.LOG_LEVEL.upper())


class JSONFormatter(logging.Formatter):
    EXTRA_FIELDS = ("user_id", "tenant_id", "action", "result", "meta")

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (field, getattr(record, field))
            for field in self.EXTRA_FIELDS
            if hasattr(record, field)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(JSONFormatter())
    logger.addHandler(_handler)

# Our handler only; keep records out of the root logger
logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Child of the ``tenantguard`` logger, e.g. ``get_logger("errors")``."""
    return logger.getChild(name)


def log_security_event(
    action: str,
    result: str,
    user_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
    level: str = "info",
) -> None:
    """
    Emit one "Security event" record.

    `action` names what was attempted ("login", "tenant_create", "tenant_gate",
    "tenants_purge", ...) and `result` how it ended ("success", "failure",
    "denied"). Empty ids are left out of the record rather than logged as null.
    """
    extra: Dict[str, Any] = {"action": action, "result": result}
    if user_id:
        extra["user_id"] = user_id
    if tenant_id:
        extra["tenant_id"] = tenant_id
    if meta:
        extra["meta"] = meta

    getattr(logger, level.lower(), logger.info)("Security event", extra=extra)
