import logging
import sys
import json
from typing import Any, Dict, Optional
from contextvars import ContextVar, Token

# Context var for the active recognition session
_session_id: ContextVar[Optional[str]] = ContextVar("session_id", default=None)

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.name,
            "message": record.getMessage(),
            "session_id": _session_id.get(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_record[key] = value

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, default=str)

def setup_logging(level: str = "INFO", stream=None):
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.addHandler(handler)
    return handler

def set_session_id(sid: Optional[str]):
    _session_id.set(sid)

def get_session_id() -> Optional[str]:
    return _session_id.get()

def enter_session(sid: str) -> Token:
    """Mark sid as the active session; pass the token to leave_session()."""
    return _session_id.set(sid)

def leave_session(token: Token):
    _session_id.reset(token)
