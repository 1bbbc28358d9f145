# txt2ics/errors.py
from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """Base class for every per-line or per-file failure.

    `field` names what failed ("date", "time", "duration", "reminder",
    "line" or "file") and `text` is the offending token.
    """

    field = "line"

    def __init__(self, message: str, text: str = "", field: Optional[str] = None):
        super().__init__(message)
        self.text = text
        if field is not None:
            self.field = field


class FileUnreadable(ConversionError):
    field = "file"


class MalformedLine(ConversionError):
    field = "line"


class InvalidDate(ConversionError):
    field = "date"


class InvalidTime(ConversionError):
    field = "time"


class InvalidDuration(ConversionError):
    # also raised for the reminder field, with field="reminder"
    field = "duration"


class ConfigError(Exception):
    pass
