"""
Flat TNEF object-record scanner

Record layout (all little-endian):
    level(1) attr_name(2) attr_type(2) length(4) data(length) checksum(2)
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .reader import Buffer, ByteReader
from .types import TNEF_HEADER_SIZE

# level + name + type + length
RECORD_HEADER_SIZE = 9
RECORD_CHECKSUM_SIZE = 2


@dataclass(frozen=True)
class ObjectRecord:
    """One TNEF attribute record; `data` is a view into the scanned buffer."""
    level: int
    name: int
    type: int
    data: memoryview
    checksum: int
    length: int


def scan_record(buffer: Buffer, offset: int = 0) -> Optional[ObjectRecord]:
    """
    Decode the record starting at `offset`.

    Returns None when no complete record fits in the remaining bytes; this is
    the normal end of the stream, including trailing garbage.
    The checksum is returned but not verified.
    """
    reader = ByteReader(buffer, offset)
    if reader.remaining < RECORD_HEADER_SIZE:
        return None

    level = reader.read_u8()
    name = reader.read_u16()
    attr_type = reader.read_u16()
    length = reader.read_u32()
    if length + RECORD_CHECKSUM_SIZE > reader.remaining:
        return None

    data = reader.read_view(length)
    checksum = reader.read_u16()

    return ObjectRecord(
        level=level,
        name=name,
        type=attr_type,
        data=data,
        checksum=checksum,
        length=reader.offset - offset,
    )


def iter_records(buffer: Buffer, offset: int = TNEF_HEADER_SIZE) -> Iterator[ObjectRecord]:
    """Yield records from `offset` until the scanner finds no complete record."""
    while True:
        record = scan_record(buffer, offset)
        if record is None:
            return
        offset += record.length
        yield record
