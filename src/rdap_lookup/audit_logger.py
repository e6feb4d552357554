"""
Structured logging for RDAP lookups.

Every component that talks to the network (bootstrap cache, resolver, retry
manager, RDAP client) takes an optional AuditLogger. Entries are kept in
memory so a caller can inspect what happened during a lookup, and are written
to a stream as JSON lines, as human-readable text, or both.

Proxy credentials and authorization headers can end up in log data (the
client logs its request headers at debug level), so values under sensitive
keys are replaced before an entry is stored or written.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from .config import LoggingConfig
from .enums import LogLevel

OUTPUT_FORMATS = ("json", "text", "both")

MASK_VALUE = "***MASKED***"

# Substrings; a key containing any of them is masked
SENSITIVE_KEYS = frozenset({
    "password", "passwd", "secret", "token", "auth",
    "credential", "api_key", "cookie",
})


def _is_sensitive(key: Any) -> bool:
    lowered = str(key).lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def mask_credentials(value: Any) -> Any:
    """Return a copy of value with every non-null sensitive entry masked."""
    if isinstance(value, dict):
        return {
            key: MASK_VALUE if _is_sensitive(key) and item is not None else mask_credentials(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [mask_credentials(item) if isinstance(item, dict) else item for item in value]
    return value


@dataclass
class LogEntry:
    """One log record. ``data`` has already been masked."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": self.timestamp,
                "level": self.level.value,
                "component": self.component,
                "message": self.message,
                "data": self.data,
            },
            ensure_ascii=False,
            default=str,
        )

    def to_text(self) -> str:
        # [TIMESTAMP] LEVEL [COMPONENT] MESSAGE {data}
        line = f"[{self.timestamp}] {self.level.value.upper()} [{self.component}] {self.message}"
        if self.data:
            line += " " + json.dumps(self.data, ensure_ascii=False, default=str)
        return line


class AuditLogger:
    """
    Structured logger with in-memory retention and a severity floor.

    Args:
        output_format: 'json', 'text' or 'both'
        output_stream: Where entries are written (defaults to sys.stderr)
        min_level: Entries below this level are neither kept nor written
    """

    MASK_VALUE = MASK_VALUE

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        min_level: LogLevel = LogLevel.DEBUG,
    ):
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Invalid output_format: {output_format}")

        self._output_format = output_format
        self._stream = output_stream or sys.stderr
        self._min_level = min_level
        self._entries: list[LogEntry] = []

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Snapshot of the entries recorded so far."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record and write one entry.

        Returns:
            The stored LogEntry, or None when level is below the floor
        """
        if level.severity < self._min_level.severity:
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=self.mask_sensitive_data(data or {}),
        )
        self._entries.append(entry)
        self._write(entry)
        return entry

    def debug(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, component, message, data)

    def warn(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.WARN, component, message, data)

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[BaseException] = None,
        request_url: Optional[str] = None,
        response_status_code: Optional[int] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Record an ERROR entry carrying the failure context.

        The exception's type name and text, the request URL and the response
        status are added to ``additional_data`` when given.
        """
        data = dict(additional_data or {})
        if error is not None:
            data["error_message"] = str(error)
            data["error_type"] = type(error).__name__
        if request_url is not None:
            data["request_url"] = request_url
        if response_status_code is not None:
            data["response_status_code"] = response_status_code

        return self.log(LogLevel.ERROR, component, message, data)

    def mask_sensitive_data(self, data: dict) -> dict:
        return mask_credentials(data)

    def _write(self, entry: LogEntry) -> None:
        if self._output_format in ("json", "both"):
            self._stream.write(entry.to_json() + "\n")
        if self._output_format in ("text", "both"):
            self._stream.write(entry.to_text() + "\n")
        self._stream.flush()

    def get_json_output(self, entry: LogEntry) -> str:
        return entry.to_json()

    def get_text_output(self, entry: LogEntry) -> str:
        return entry.to_text()

    def clear_entries(self) -> None:
        self._entries.clear()


def create_logger(
    config: LoggingConfig,
    output_stream: Optional[TextIO] = None,
) -> AuditLogger:
    """Build a logger from a logging configuration."""
    return AuditLogger(
        output_format=config.output_format,
        output_stream=output_stream,
        min_level=config.log_level,
    )
