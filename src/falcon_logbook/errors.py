"""Error codes and exception types raised by the logbook codec."""
from __future__ import annotations

ERRORS = {
    "E_IO": "Logbook source or destination unavailable",
    "E_TRUNCATED": "Logbook stream ended before the record was complete",
    "E_TEXT_ENCODING": "Fixed-width field is not valid text",
    "E_LAYOUT": "Logbook layout violated",
    "E_RANK": "Rank ordinal out of range",
    "E_VOICE": "Voice index out of range",
    "E_CHECKSUM": "Trailing sentinel is not zero",
    "E_PASSWORD_TERMINATOR": "Password terminator byte is not zero",
    "E_FIELD_TOO_LONG": "Value does not fit its fixed-width field",
    "E_TEXT_FORMAT": "Structured text does not describe a logbook",
}


class LogbookError(Exception):
    """Base class for every failure surfaced by the codec."""

    code = "E_LAYOUT"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": ERRORS[self.code], "detail": self.message}


class LogbookIOError(LogbookError):
    code = "E_IO"

    def __init__(self, message: str, path: str | None = None):
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
        self.path = path


class TruncatedLogbookError(LogbookIOError):
    code = "E_TRUNCATED"

    def __init__(self, offset: int, wanted: int, got: int):
        super().__init__(
            f"Unexpected end of logbook at offset {offset} (wanted {wanted} bytes, got {got})"
        )
        self.offset = offset


class TextEncodingError(LogbookError):
    code = "E_TEXT_ENCODING"


class LayoutError(LogbookError):
    code = "E_LAYOUT"


class InvalidRankError(LayoutError):
    code = "E_RANK"

    def __init__(self, ordinal: int):
        super().__init__(f"{ordinal} isn't a valid rank index")
        self.ordinal = ordinal


class InvalidVoiceError(LayoutError):
    code = "E_VOICE"

    def __init__(self, voice: int, low: int, high: int):
        super().__init__(f"voice index {voice} outside {low}..{high}")
        self.voice = voice


class ChecksumError(LayoutError):
    code = "E_CHECKSUM"

    def __init__(self, value: int):
        super().__init__(
            f"Decryption failed - bad checksum (sentinel {value:#010x}, expected 0)"
        )
        self.value = value


class PasswordIntegrityError(LayoutError):
    code = "E_PASSWORD_TERMINATOR"


class FieldTooLongError(LogbookError):
    code = "E_FIELD_TOO_LONG"

    def __init__(self, field: str, value: str, limit: int):
        super().__init__(
            f"{field} {value!r} is too long (limit {limit} bytes)"
        )
        self.field = field
        self.value = value
        self.limit = limit


class TextFormatError(LogbookError):
    code = "E_TEXT_FORMAT"

    def __init__(self, message: str, source: str | None = None):
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message)
        self.source = source
