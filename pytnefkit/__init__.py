"""
PyTnefKit - Pure Python decoder for Microsoft TNEF (winmail.dat) files
"""

import logging

from .decoder import Attachment, DecodedMessage, decode, decode_file
from .exceptions import (DecodeError, NoMarkerError, PropertyListTooShortError,
                         TruncatedError, UnknownTagTypeError)
from .properties import (NamedProperty, PropertyTag, PropertyValue, decode_property_list,
                         find_property)
from .types import AttributeLevel, NamedPropertyKind, PropertyType, TnefAttribute

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    'decode', 'decode_file', 'decode_property_list', 'find_property',
    'DecodedMessage', 'Attachment', 'PropertyValue', 'NamedProperty', 'PropertyTag',
    'PropertyType', 'AttributeLevel', 'TnefAttribute', 'NamedPropertyKind',
    'DecodeError', 'NoMarkerError', 'PropertyListTooShortError', 'UnknownTagTypeError',
    'TruncatedError',
]
