"""
MAPI property tags and property-list decoding
Based on MS-OXTNEF section 2.1.3.4 (MsgPropertyList) and MS-OXPROPS
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Tuple, Union

from .exceptions import PropertyListTooShortError, TruncatedError, UnknownTagTypeError
from .reader import Buffer, ByteReader
from .types import MV_FLAG, NamedPropertyKind, PropertyType

logger = logging.getLogger(__name__)

# Shapes a decoded value may take; _CODECS fixes which one each tag type yields
Scalar = Union[None, int, float, bool, bytes, str]
PropertyData = Union[Scalar, Tuple[Scalar, ...]]

# Tag ids at or above this value carry a named-property header
NAMED_PROPERTY_BASE = 0x8000

GUID_SIZE = 16

_FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


class PropertyTag:
    """Common MAPI property ids (PidTag*)"""

    # Message Envelope Properties
    PR_MESSAGE_CLASS = 0x001A
    PR_SUBJECT = 0x0037
    PR_CONVERSATION_TOPIC = 0x0070
    PR_IMPORTANCE = 0x0017
    PR_MESSAGE_FLAGS = 0x0E07

    # Time Properties
    PR_CLIENT_SUBMIT_TIME = 0x0039
    PR_MESSAGE_DELIVERY_TIME = 0x0E06
    PR_CREATION_TIME = 0x3007
    PR_LAST_MODIFICATION_TIME = 0x3008

    # Body Properties
    PR_BODY = 0x1000
    PR_RTF_COMPRESSED = 0x1009
    PR_HTML = 0x1013
    PR_INTERNET_CPID = 0x3FDE

    # Sender Properties
    PR_SENDER_NAME = 0x0C1A
    PR_SENDER_EMAIL_ADDRESS = 0x0C1F

    # Attachment Properties
    PR_ATTACH_SIZE = 0x0E20
    PR_ATTACH_NUM = 0x0E21
    PR_DISPLAY_NAME = 0x3001
    PR_ATTACH_DATA_BIN = 0x3701
    PR_ATTACH_ENCODING = 0x3702
    PR_ATTACH_EXTENSION = 0x3703
    PR_ATTACH_FILENAME = 0x3704
    PR_ATTACH_METHOD = 0x3705
    PR_ATTACH_LONG_FILENAME = 0x3707
    PR_RENDERING_POSITION = 0x370B
    PR_ATTACH_MIME_TAG = 0x370E
    PR_ATTACH_CONTENT_ID = 0x3712
    PR_ATTACH_CONTENT_LOCATION = 0x3713
    PR_ATTACH_FLAGS = 0x3714
    PR_ATTACHMENT_HIDDEN = 0x7FFE

    # Store / object properties
    PR_MAPPING_SIGNATURE = 0x0FF8
    PR_OBJECT_TYPE = 0x0FFE
    PR_STORE_SUPPORT_MASK = 0x340D


@dataclass(frozen=True)
class NamedProperty:
    """Named-property identity: a GUID namespace plus a numeric id or a string name"""
    guid: bytes
    kind: NamedPropertyKind
    id: Optional[int] = None
    name: Optional[str] = None

    @property
    def guid_text(self) -> str:
        return str(uuid.UUID(bytes_le=self.guid))


@dataclass(frozen=True)
class PropertyValue:
    """
    One decoded MAPI property.

    `value` has exactly the shape implied by `tag_type`; multi-value types
    hold a tuple of scalar-shaped elements and `count` is their number.
    """
    tag_type: int
    tag_id: int
    value: PropertyData
    count: int = 1
    kind: str = ""
    named: Optional[NamedProperty] = None

    @property
    def base_type(self) -> int:
        return self.tag_type & ~MV_FLAG

    @property
    def is_multi_value(self) -> bool:
        return bool(self.tag_type & MV_FLAG)

    @property
    def is_named(self) -> bool:
        return self.named is not None

    def as_bytes(self) -> Optional[bytes]:
        """
        Return a scalar text or binary value as raw bytes.

        8-bit strings round-trip to their original bytes; Unicode strings are
        encoded as UTF-8. Returns None for any other shape.
        """
        if self.is_multi_value:
            return None
        if isinstance(self.value, bytes):
            return self.value
        if self.tag_type == PropertyType.PT_STRING8:
            return self.value.encode('latin-1')
        if self.tag_type == PropertyType.PT_UNICODE:
            return self.value.encode('utf-8')
        return None

    def as_datetime(self) -> Optional[datetime]:
        """Convert a scalar PT_SYSTIME value to an aware UTC datetime."""
        if self.tag_type != PropertyType.PT_SYSTIME:
            return None
        return filetime_to_datetime(self.value)


def find_property(values: Iterable[PropertyValue], tag_id: int) -> Optional[PropertyValue]:
    """Return the first property with the given tag id, or None."""
    for prop in values:
        if prop.tag_id == tag_id:
            return prop
    return None


def filetime_to_datetime(filetime: int) -> datetime:
    """
    Convert Windows FILETIME (64-bit) to Python datetime.
    Raises OverflowError for values past the year 9999.
    """
    return _FILETIME_EPOCH + timedelta(microseconds=filetime // 10)


# --- Element decoders ---------------------------------------------------

def _read_null(reader: ByteReader):
    return None


def _read_boolean(reader: ByteReader) -> bool:
    return reader.read_u16() != 0


def _read_clsid(reader: ByteReader) -> str:
    return str(uuid.UUID(bytes_le=reader.read_bytes(GUID_SIZE)))


def _read_blob(reader: ByteReader, size: int) -> bytes:
    return reader.read_bytes(size)


def _read_string8(reader: ByteReader, size: int) -> str:
    # 8-bit pass-through: latin-1 maps every byte to one code point
    return reader.read_bytes(size).rstrip(b'\x00').decode('latin-1')


def _read_unicode(reader: ByteReader, size: int) -> str:
    return reader.read_utf16(size).rstrip('\x00')


class _Codec(NamedTuple):
    kind: str
    read: Callable
    # bytes per element; 4 for length-prefixed types (the length field)
    width: int
    # length-prefixed types carry a count, then length + data + pad per element
    sized: bool = False
    # 16-bit scalars occupy a 4-byte slot
    padded: bool = False
    empty: Any = None


_CODECS = {
    PropertyType.PT_NULL: _Codec('null', _read_null, 0),
    PropertyType.PT_SHORT: _Codec('int16', ByteReader.read_i16, 2, padded=True),
    PropertyType.PT_LONG: _Codec('int32', ByteReader.read_i32, 4),
    PropertyType.PT_FLOAT: _Codec('float32', ByteReader.read_f32, 4),
    PropertyType.PT_DOUBLE: _Codec('float64', ByteReader.read_f64, 8),
    PropertyType.PT_CURRENCY: _Codec('int64', ByteReader.read_i64, 8),
    PropertyType.PT_APPTIME: _Codec('float64', ByteReader.read_f64, 8),
    PropertyType.PT_BOOLEAN: _Codec('boolean', _read_boolean, 2, padded=True),
    PropertyType.PT_OBJECT: _Codec('object', _read_blob, 4, sized=True, empty=b''),
    PropertyType.PT_LONGLONG: _Codec('int64', ByteReader.read_i64, 8),
    PropertyType.PT_STRING8: _Codec('string', _read_string8, 4, sized=True, empty=''),
    PropertyType.PT_UNICODE: _Codec('string', _read_unicode, 4, sized=True, empty=''),
    PropertyType.PT_SYSTIME: _Codec('systime', ByteReader.read_u64, 8),
    PropertyType.PT_CLSID: _Codec('clsid', _read_clsid, GUID_SIZE),
    PropertyType.PT_BINARY: _Codec('binary', _read_blob, 4, sized=True, empty=b''),
}

# Base types that have a multi-value form
_MV_BASES = frozenset((
    PropertyType.PT_SHORT,
    PropertyType.PT_LONG,
    PropertyType.PT_FLOAT,
    PropertyType.PT_DOUBLE,
    PropertyType.PT_CURRENCY,
    PropertyType.PT_APPTIME,
    PropertyType.PT_LONGLONG,
    PropertyType.PT_STRING8,
    PropertyType.PT_UNICODE,
    PropertyType.PT_SYSTIME,
    PropertyType.PT_CLSID,
    PropertyType.PT_BINARY,
))


def _lookup_codec(tag_type: int) -> Optional[_Codec]:
    base = tag_type & ~MV_FLAG
    if tag_type & MV_FLAG and base not in _MV_BASES:
        return None
    return _CODECS.get(base)


def _read_count(reader: ByteReader, width: int) -> int:
    """Read an element count and make sure that many elements can fit."""
    start = reader.offset
    count = reader.read_u32()
    if count * width > reader.remaining:
        raise TruncatedError(start, count * width, reader.remaining)
    return count


def _read_sized_element(reader: ByteReader, codec: _Codec):
    start = reader.offset
    size = reader.read_u32()
    value = codec.read(reader, size)
    reader.skip_padding(start)
    return value


def _read_value(reader: ByteReader, tag_type: int, codec: _Codec):
    """Decode a property value; returns (value, count)."""
    if tag_type & MV_FLAG:
        count = _read_count(reader, codec.width)
        start = reader.offset
        if codec.sized:
            values = tuple(_read_sized_element(reader, codec) for _ in range(count))
        else:
            values = tuple(codec.read(reader) for _ in range(count))
            if codec.padded:
                reader.skip_padding(start)
        return values, count

    if codec.sized:
        count = _read_count(reader, codec.width)
        values = [_read_sized_element(reader, codec) for _ in range(count)]
        if count != 1:
            logger.debug("scalar property type %#06x declared %d values", tag_type, count)
            return codec.empty, 1
        return values[0], 1

    start = reader.offset
    value = codec.read(reader)
    if codec.padded:
        reader.skip_padding(start)
    return value, 1


def _read_named_property(reader: ByteReader) -> NamedProperty:
    guid = reader.read_bytes(GUID_SIZE)
    kind = reader.read_u32()
    if kind == NamedPropertyKind.ID:
        return NamedProperty(guid=guid, kind=NamedPropertyKind.ID, id=reader.read_u32())

    start = reader.offset
    size = reader.read_u32()
    name = reader.read_utf16(size).rstrip('\x00')
    reader.skip_padding(start)
    return NamedProperty(guid=guid, kind=NamedPropertyKind.STRING, name=name)


def decode_property_list(data: Buffer) -> List[PropertyValue]:
    """
    Decode a MsgPropertyList blob (attMsgProps / attAttachment payload).

    The leading property count is read but not trusted: entries are decoded
    until the blob is exhausted. Any malformed entry aborts the whole list.
    """
    if len(data) < 4:
        raise PropertyListTooShortError(len(data))

    reader = ByteReader(data)
    declared = reader.read_u32()

    values = []
    while not reader.at_end:
        entry_offset = reader.offset
        tag_type = reader.read_u16()
        tag_id = reader.read_u16()

        named = None
        if tag_id >= NAMED_PROPERTY_BASE:
            named = _read_named_property(reader)

        codec = _lookup_codec(tag_type)
        if codec is None:
            raise UnknownTagTypeError(tag_type, entry_offset)

        value, count = _read_value(reader, tag_type, codec)
        values.append(PropertyValue(
            tag_type=tag_type,
            tag_id=tag_id,
            value=value,
            count=count,
            kind=codec.kind,
            named=named,
        ))

    if declared != len(values):
        logger.debug("property list declared %d entries, decoded %d", declared, len(values))
    return values
