"""
=============================================================================
ACCESS LOGGING
=============================================================================

Structured access log entries for served requests.

The static server does not log accesses itself. After every successful
200 response it calls an injected access logger, if one is attached and a
log mode is configured:

    logger.write(mode, request, response, message=None)

``AccessLogger`` is the stock implementation of that interface. Each mode
name is bound to an output format and emits to its own logger, so modes
can be routed independently:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    MODES                                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   AccessLogger(modes={"access": "text", "audit": "json"})           │
    │                                                                      │
    │   write("access", ...) → logging.getLogger("staticweb.access.access")│
    │       127.0.0.1 - - [10/Jun/2024:10:55:36 +0000] "GET /" 200 1234   │
    │                                                                      │
    │   write("audit", ...)  → logging.getLogger("staticweb.access.audit") │
    │       {"method": "GET", "path": "/", "status_code": 200, ...}       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Modes that were never declared use the text format.

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Protocol


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class AccessLogSink(Protocol):
    """Outbound access log interface called by ``StaticWeb``."""

    def write(self, mode: str, request: Any, response: Any, message: Optional[str] = None) -> None: ...


@dataclass
class RequestLog:
    """
    Structured log entry for a served request.

    Fields:
        method:         HTTP method, "GET" when the request has none
        path:           Request target as received
        client_ip:      Client address, "-" when unknown
        user_agent:     Browser/client identifier, "-" when absent
        status_code:    Response status
        content_length: Response body size in bytes
        timestamp:      When the entry was written
        message:        Optional free text from the caller
    """

    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    timestamp: str
    message: Optional[str] = None

    @classmethod
    def capture(cls, request: Any, response: Any, message: Optional[str] = None) -> "RequestLog":
        """Build an entry from any request/response pair, tolerating missing attributes."""
        client_address = getattr(request, "client_address", None) or ("-", 0)
        headers = getattr(request, "headers", None) or {}
        body = getattr(response, "body", b"") or b""
        return cls(
            method=getattr(request, "method", "GET") or "GET",
            path=getattr(request, "url", "") or "",
            client_ip=client_address[0] or "-",
            user_agent=headers.get("user-agent", "") or "-",
            status_code=int(getattr(response, "status_code", 0) or 0),
            content_length=len(body),
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            message=message,
        )

    def to_dict(self) -> dict:
        """Dictionary for JSON serialization; ``message`` omitted when empty."""
        data = asdict(self)
        if data["message"] is None:
            del data["message"]
        return data

    def to_text(self) -> str:
        """Apache combined-style line."""
        line = (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length}'
        )
        if self.message:
            line += f" {self.message}"
        return line


class AccessLogger:
    """
    Access log sink writing to the standard ``logging`` tree.

    Args:
        modes:     Mode name → "text" or "json".
        log_level: Level the entries are emitted at.
        namespace: Parent logger name; each mode logs to "<namespace>.<mode>".
    """

    FORMATS = ("text", "json")

    def __init__(
        self,
        modes: Optional[Mapping[str, str]] = None,
        log_level: int = logging.INFO,
        namespace: str = "staticweb.access",
    ):
        self.modes = dict(modes or {})
        for mode, log_format in self.modes.items():
            if log_format not in self.FORMATS:
                raise ValueError(f"Unknown access log format for {mode!r}: {log_format!r}")
        self.log_level = log_level
        self.namespace = namespace

    def logger_for(self, mode: str) -> logging.Logger:
        return logging.getLogger(f"{self.namespace}.{mode}")

    def write(self, mode: str, request: Any, response: Any, message: Optional[str] = None) -> None:
        entry = RequestLog.capture(request, response, message)
        if self.modes.get(mode, "text") == "json":
            line = json.dumps(entry.to_dict())
        else:
            line = entry.to_text()
        self.logger_for(mode).log(self.log_level, line)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger for standalone use."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger("staticweb").setLevel(level)
