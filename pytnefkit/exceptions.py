"""
Exception classes for pytnefkit

Every failure raised while decoding derives from DecodeError, so callers
can catch a single type around decode().
"""


class DecodeError(Exception):
    """Base exception for all TNEF decoding errors."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class NoMarkerError(DecodeError):
    """
    Raised when the input does not begin with the TNEF signature.

    The data may just carry a .tnef / winmail.dat name or a
    application/ms-tnef content type without actually being TNEF.
    """

    def __init__(self, message: str = "file did not begin with a TNEF marker"):
        super().__init__(message)


class PropertyListTooShortError(DecodeError):
    """Raised when a MAPI property blob cannot even hold its 4-byte count."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"property list too short: {length} bytes")


class UnknownTagTypeError(DecodeError):
    """Raised for a property tag type outside the supported MAPI type table."""

    def __init__(self, tag_type: int, offset: int):
        self.tag_type = tag_type
        self.offset = offset
        super().__init__(f"property data type {tag_type:#06x} is invalid (offset {offset})")


class TruncatedError(DecodeError):
    """Raised when a read would run past the end of the current byte window."""

    def __init__(self, offset: int, wanted: int, available: int):
        self.offset = offset
        self.wanted = wanted
        self.available = available
        super().__init__(
            f"truncated data at offset {offset}: wanted {wanted} bytes, {available} available"
        )
