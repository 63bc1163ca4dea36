"""
Type definitions and enums for TNEF attributes and MAPI properties
"""

from enum import IntEnum


TNEF_SIGNATURE = 0x223E9F78

# 4-byte signature + 2-byte legacy key
TNEF_HEADER_SIZE = 6

MV_FLAG = 0x1000


class AttributeLevel(IntEnum):
    """TNEF record level"""
    MESSAGE = 0x01
    ATTACHMENT = 0x02


class TnefAttribute(IntEnum):
    """TNEF attribute-name codes (low word of the attribute id)"""
    OWNER = 0x0000
    SENT_FOR = 0x0001
    DELEGATE = 0x0002
    DATE_START = 0x0006
    DATE_END = 0x0007
    AID_OWNER = 0x0008
    REQUEST_RES = 0x0009
    FROM = 0x8000
    SUBJECT = 0x8004
    DATE_SENT = 0x8005
    DATE_RECD = 0x8006
    MESSAGE_STATUS = 0x8007
    MESSAGE_CLASS = 0x8008
    MESSAGE_ID = 0x8009
    PARENT_ID = 0x800A
    CONVERSATION_ID = 0x800B
    BODY = 0x800C
    PRIORITY = 0x800D
    ATTACH_DATA = 0x800F
    ATTACH_TITLE = 0x8010
    ATTACH_META_FILE = 0x8011
    ATTACH_CREATE_DATE = 0x8012
    ATTACH_MODIFY_DATE = 0x8013
    DATE_MODIFY = 0x8020
    ATTACH_TRANSPORT_FILENAME = 0x9001
    ATTACH_REND_DATA = 0x9002
    MAPI_PROPS = 0x9003
    RECIP_TABLE = 0x9004
    ATTACHMENT = 0x9005
    TNEF_VERSION = 0x9006
    OEM_CODEPAGE = 0x9007
    ORIGINAL_MESSAGE_CLASS = 0x9008


class PropertyType(IntEnum):
    """MAPI property type enumeration"""
    PT_NULL = 0x0001
    PT_SHORT = 0x0002
    PT_LONG = 0x0003
    PT_FLOAT = 0x0004
    PT_DOUBLE = 0x0005
    PT_CURRENCY = 0x0006
    PT_APPTIME = 0x0007
    PT_BOOLEAN = 0x000B
    PT_OBJECT = 0x000D
    PT_LONGLONG = 0x0014
    PT_STRING8 = 0x001E
    PT_UNICODE = 0x001F
    PT_SYSTIME = 0x0040
    PT_CLSID = 0x0048
    PT_BINARY = 0x0102
    PT_MV_SHORT = 0x1002
    PT_MV_LONG = 0x1003
    PT_MV_FLOAT = 0x1004
    PT_MV_DOUBLE = 0x1005
    PT_MV_CURRENCY = 0x1006
    PT_MV_APPTIME = 0x1007
    PT_MV_LONGLONG = 0x1014
    PT_MV_STRING8 = 0x101E
    PT_MV_UNICODE = 0x101F
    PT_MV_SYSTIME = 0x1040
    PT_MV_CLSID = 0x1048
    PT_MV_BINARY = 0x1102


class NamedPropertyKind(IntEnum):
    """How a named property is identified inside its GUID namespace"""
    ID = 0x00000000
    STRING = 0x00000001
