"""
TNEF stream decoder
Based on MS-OXTNEF: walks the flat attribute stream and assembles the
message body, message class, MAPI properties and attachments.
"""

import logging
import re
import struct
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import NoMarkerError
from .properties import PropertyTag, PropertyValue, decode_property_list, find_property
from .reader import Buffer
from .records import ObjectRecord, iter_records
from .types import TNEF_HEADER_SIZE, TNEF_SIGNATURE, AttributeLevel, TnefAttribute

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    """An attachment embedded in the TNEF stream"""
    title: str = ""
    data: Optional[bytes] = None
    properties: List[PropertyValue] = field(default_factory=list)

    def get_property(self, tag_id: int) -> Optional[PropertyValue]:
        """Get an attachment MAPI property by tag id"""
        return find_property(self.properties, tag_id)

    def long_filename(self) -> str:
        """PR_ATTACH_LONG_FILENAME when present, otherwise the TNEF title"""
        prop = self.get_property(PropertyTag.PR_ATTACH_LONG_FILENAME)
        if prop is not None and isinstance(prop.value, str) and prop.value:
            return prop.value
        return self.title

    def content_id(self) -> Optional[str]:
        """PR_ATTACH_CONTENT_ID value, or None when absent"""
        prop = self.get_property(PropertyTag.PR_ATTACH_CONTENT_ID)
        if prop is None or not isinstance(prop.value, str):
            return None
        return prop.value

    def _add_attribute(self, record: ObjectRecord):
        if record.name == TnefAttribute.ATTACH_TITLE:
            self.title = bytes(record.data).replace(b'\x00', b'').decode('latin-1')
        elif record.name == TnefAttribute.ATTACH_DATA:
            self.data = bytes(record.data)
        else:
            logger.debug("ignoring attachment attribute %#06x", record.name)


@dataclass
class DecodedMessage:
    """Body, message class, MAPI properties and attachments of a TNEF stream"""
    body: Optional[bytes] = None
    body_html: Optional[bytes] = None
    message_class: Optional[bytes] = None
    properties: List[PropertyValue] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)

    def get_property(self, tag_id: int) -> Optional[PropertyValue]:
        """Get a message-level MAPI property by tag id"""
        return find_property(self.properties, tag_id)

    def attachment_is_mime_related(self, attachment: Attachment) -> bool:
        """
        Check whether the HTML body references the attachment as a cid: URL.

        The reference must be quoted, e.g. src="cid:image001.png@01D4...".
        """
        prop = attachment.get_property(PropertyTag.PR_ATTACH_CONTENT_ID)
        cid = prop.as_bytes() if prop is not None else None
        if not cid or not self.body_html:
            return False

        pattern = (
            rb'(\'|")\s*cid\s*:\s*'
            + re.escape(cid)
            + rb'\s*(\'|")'
        )
        return re.search(pattern, self.body_html) is not None


def _copy_body(message: DecodedMessage):
    for prop in message.properties:
        if prop.tag_id == PropertyTag.PR_BODY:
            message.body = prop.as_bytes()
        elif prop.tag_id == PropertyTag.PR_HTML:
            message.body_html = prop.as_bytes()


def decode(data: Buffer) -> DecodedMessage:
    """
    Decode a TNEF stream.

    Raises NoMarkerError when the data is not TNEF, and any other DecodeError
    when an embedded MAPI property list is malformed. Trailing bytes that do
    not form a complete record end the stream silently.
    """
    if len(data) < 4 or struct.unpack_from('<I', data, 0)[0] != TNEF_SIGNATURE:
        raise NoMarkerError()

    message = DecodedMessage()
    # Index of the attachment being filled; attributes follow attAttachRendData
    current = None

    for record in iter_records(data, TNEF_HEADER_SIZE):
        logger.debug("record level=%d name=%#06x type=%#06x length=%d",
                     record.level, record.name, record.type, len(record.data))

        if record.name == TnefAttribute.MESSAGE_CLASS:
            message.message_class = bytes(record.data).rstrip(b'\x00')

        elif record.name == TnefAttribute.ATTACH_REND_DATA:
            message.attachments.append(Attachment())
            current = len(message.attachments) - 1

        elif record.level == AttributeLevel.ATTACHMENT:
            if current is None:
                logger.warning("attachment attribute %#06x before any attachment, ignored",
                               record.name)
                continue
            attachment = message.attachments[current]
            if record.name == TnefAttribute.ATTACHMENT:
                attachment.properties = decode_property_list(record.data)
            else:
                attachment._add_attribute(record)

        elif record.name == TnefAttribute.MAPI_PROPS:
            message.properties = decode_property_list(record.data)
            _copy_body(message)

        else:
            logger.debug("ignoring message attribute %#06x", record.name)

    return message


def decode_file(path) -> DecodedMessage:
    """Read a TNEF file (e.g. winmail.dat) into memory and decode it."""
    with open(path, 'rb') as f:
        data = f.read()
    return decode(data)
