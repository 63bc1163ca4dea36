"""
Basic functionality tests
"""

import random
import struct

import pytest

from pytnefkit import (DecodeError, DecodedMessage, NoMarkerError, PropertyTag, PropertyType,
                       TnefAttribute, UnknownTagTypeError, decode, decode_file)

from tnef_builder import (SIGNATURE, attachment, attachment_record, message_record, prop,
                          prop_list, sized, tnef, utf16z)


def message_props(*props):
    return message_record(TnefAttribute.MAPI_PROPS, prop_list(*props))


@pytest.mark.parametrize('data', [
    b'',
    b'\x78\x9f\x3e',
    b'\x00\x00\x00\x00\x01\x00',
    b'PK\x03\x04' + b'\x00' * 32,
])
def test_no_marker(data):
    with pytest.raises(NoMarkerError):
        decode(data)


def test_signature_only():
    message = decode(SIGNATURE)
    assert message.attachments == []


def test_empty_stream():
    message = decode(tnef())

    assert message.attachments == []
    assert message.body is None
    assert message.body_html is None
    assert message.message_class is None
    assert message.properties == []


def test_message_class_trailing_nul_stripped():
    message = decode(tnef(message_record(TnefAttribute.MESSAGE_CLASS, b'IPM.Note\x00', 0x0007)))
    assert message.message_class == b'IPM.Note'


def test_one_file():
    payload = b'Attachment body\n' * 10
    message = decode(tnef(
        message_record(TnefAttribute.TNEF_VERSION, b'\x00\x00\x01\x00', 0x0008),
        attachment(b'AUTHORS\x00', payload),
    ))

    assert len(message.attachments) == 1
    assert message.attachments[0].title == 'AUTHORS'
    assert message.attachments[0].data == payload
    assert len(message.attachments[0].data) == len(payload)


def test_two_files_keep_order():
    message = decode(tnef(
        attachment(b'AUTHORS\x00', b'one'),
        attachment(b'README\x00', b'two'),
    ))

    assert [a.title for a in message.attachments] == ['AUTHORS', 'README']
    assert [a.data for a in message.attachments] == [b'one', b'two']


def test_title_embedded_nul_removed():
    message = decode(tnef(attachment(b'RE\x00AD\x00ME\x00', b'')))
    assert message.attachments[0].title == 'README'


def test_attachment_without_data():
    message = decode(tnef(attachment_record(TnefAttribute.ATTACH_REND_DATA, b'\x01\x00')))
    assert message.attachments[0].title == ''
    assert message.attachments[0].data is None


def test_attachment_record_before_rend_data_ignored():
    message = decode(tnef(
        attachment_record(TnefAttribute.ATTACH_TITLE, b'orphan\x00'),
        attachment(b'kept\x00', b'x'),
    ))
    assert [a.title for a in message.attachments] == ['kept']


def test_garbage_at_end():
    message = decode(tnef(message_record(TnefAttribute.MESSAGE_CLASS, b'IPM.Note\x00'))
                     + b'\x02\x0f\x80\x06\x00\xff\xff\xff\x7fjunk')
    assert message.attachments == []
    assert message.message_class == b'IPM.Note'


def test_garbage_after_header():
    message = decode(SIGNATURE + b'\x01\x00' + b'\x01' * 8)
    assert message.attachments == []


def test_attachment_properties():
    props = prop_list(
        prop(PropertyType.PT_LONG, PropertyTag.PR_ATTACH_SIZE, struct.pack('<i', 3285)),
        prop(PropertyType.PT_STRING8, PropertyTag.PR_ATTACH_EXTENSION, sized(b'.jpg\x00')),
        prop(PropertyType.PT_UNICODE, PropertyTag.PR_ATTACH_LONG_FILENAME, sized(utf16z('image001.jpg'))),
        prop(PropertyType.PT_BOOLEAN, PropertyTag.PR_ATTACHMENT_HIDDEN, b'\x01\x00\x00\x00'),
    )
    message = decode(tnef(attachment(b'IMAGE0~1.JPG\x00', b'\xff\xd8', props)))
    att = message.attachments[0]

    assert len(att.properties) == 4
    assert att.get_property(PropertyTag.PR_ATTACH_SIZE).value == 3285
    assert att.get_property(PropertyTag.PR_ATTACH_EXTENSION).value == '.jpg'
    assert att.get_property(PropertyTag.PR_ATTACHMENT_HIDDEN).value is True
    assert att.long_filename() == 'image001.jpg'
    assert att.title == 'IMAGE0~1.JPG'


def test_long_filename_falls_back_to_title():
    message = decode(tnef(attachment(b'AUTHORS\x00', b'x')))
    assert message.attachments[0].long_filename() == 'AUTHORS'


def test_message_properties_fill_body():
    html = b'<html><body><img src="cid:image001.png@01D49162.DB2DC760"></body></html>'
    message = decode(tnef(message_props(
        prop(PropertyType.PT_STRING8, PropertyTag.PR_SUBJECT, sized(b'Hello\x00')),
        prop(PropertyType.PT_UNICODE, PropertyTag.PR_BODY, sized(utf16z('Plain body'))),
        prop(PropertyType.PT_BINARY, PropertyTag.PR_HTML, sized(html)),
    )))

    assert message.body == b'Plain body'
    assert message.body_html == html
    assert message.get_property(PropertyTag.PR_SUBJECT).value == 'Hello'
    assert len(message.properties) == 3


def test_string8_body_bytes_preserved():
    message = decode(tnef(message_props(
        prop(PropertyType.PT_STRING8, PropertyTag.PR_BODY, sized(b'Gr\xfc\xdfe\x00')),
    )))
    assert message.body == b'Gr\xfc\xdfe'


def test_message_properties_without_body():
    message = decode(tnef(message_props(
        prop(PropertyType.PT_LONG, PropertyTag.PR_INTERNET_CPID, struct.pack('<i', 65001)),
    )))
    assert message.body is None
    assert message.body_html is None
    assert message.get_property(PropertyTag.PR_INTERNET_CPID).value == 65001


def test_attachment_is_mime_related():
    cid = 'image001.png@01D49162.DB2DC760'
    related_props = prop_list(
        prop(PropertyType.PT_STRING8, PropertyTag.PR_ATTACH_CONTENT_ID, sized(cid.encode() + b'\x00')),
    )
    other_props = prop_list(
        prop(PropertyType.PT_UNICODE, PropertyTag.PR_ATTACH_CONTENT_ID, sized(utf16z('other@x'))),
    )
    html = ('<p>see</p><img src = " cid : %s "/>' % cid).encode()
    message = decode(tnef(
        message_props(prop(PropertyType.PT_BINARY, PropertyTag.PR_HTML, sized(html))),
        attachment(b'image001.png\x00', b'\x89PNG', related_props),
        attachment(b'other.png\x00', b'\x89PNG', other_props),
        attachment(b'plain.txt\x00', b'text'),
    ))

    related, other, plain = message.attachments
    assert related.content_id() == cid
    assert message.attachment_is_mime_related(related)
    assert not message.attachment_is_mime_related(other)
    assert not message.attachment_is_mime_related(plain)


def test_content_id():
    props = prop_list(
        prop(PropertyType.PT_UNICODE, PropertyTag.PR_ATTACH_CONTENT_ID, sized(utf16z('part1@example'))),
    )
    message = decode(tnef(
        attachment(b'a.png\x00', b'\x89PNG', props),
        attachment(b'b.txt\x00', b'text'),
    ))
    with_cid, without_cid = message.attachments
    assert with_cid.content_id() == 'part1@example'
    assert without_cid.content_id() is None


def test_mime_related_requires_html_body():
    props = prop_list(
        prop(PropertyType.PT_UNICODE, PropertyTag.PR_ATTACH_CONTENT_ID, sized(utf16z('a@b'))),
    )
    message = decode(tnef(attachment(b'a.png\x00', b'', props)))
    assert not message.attachment_is_mime_related(message.attachments[0])


def test_bad_attachment_properties_fail_whole_decode():
    bad = prop_list(prop(0x0099, PropertyTag.PR_ATTACH_METHOD, b'\x01\x00\x00\x00'))
    with pytest.raises(UnknownTagTypeError):
        decode(tnef(
            attachment(b'AUTHORS\x00', b'ok'),
            attachment(b'README\x00', b'bad', bad),
        ))


def test_bad_message_properties_fail_whole_decode():
    with pytest.raises(DecodeError):
        decode(tnef(message_record(TnefAttribute.MAPI_PROPS, b'\x01\x00')))


def test_decode_is_idempotent():
    data = tnef(
        message_record(TnefAttribute.MESSAGE_CLASS, b'IPM.Note\x00'),
        message_props(prop(PropertyType.PT_UNICODE, PropertyTag.PR_BODY, sized(utf16z('body')))),
        attachment(b'AUTHORS\x00', b'data', prop_list(
            prop(PropertyType.PT_MV_LONG, 0x6000, struct.pack('<Iii', 2, 1, 2)),
        )),
    )
    first = decode(data)
    second = decode(data)

    assert isinstance(first, DecodedMessage)
    assert first == second
    assert first is not second


def test_decode_accepts_bytearray_and_memoryview():
    data = tnef(attachment(b'AUTHORS\x00', b'data'))
    assert decode(bytearray(data)) == decode(data)
    assert decode(memoryview(data)) == decode(data)


def test_decode_file(tmp_path):
    filepath = tmp_path / "winmail.dat"
    filepath.write_bytes(tnef(attachment(b'AUTHORS\x00', b'data')))

    message = decode_file(str(filepath))
    assert message.attachments[0].title == 'AUTHORS'


def test_decode_file_missing(tmp_path):
    with pytest.raises(OSError):
        decode_file(tmp_path / "missing.dat")


def test_random_buffers_never_escape_decode_error():
    rng = random.Random(20181121)
    valid = tnef(
        message_record(TnefAttribute.MESSAGE_CLASS, b'IPM.Note\x00'),
        message_props(
            prop(PropertyType.PT_UNICODE, PropertyTag.PR_BODY, sized(utf16z('body'))),
            prop(PropertyType.PT_MV_SHORT, 0x6000, struct.pack('<Ihhh', 3, 1, 2, 3) + b'\x00\x00'),
        ),
        attachment(b'AUTHORS\x00', b'data', prop_list(
            prop(PropertyType.PT_STRING8, PropertyTag.PR_ATTACH_CONTENT_ID, sized(b'cid\x00')),
        )),
    )

    for _ in range(500):
        if rng.random() < 0.5:
            data = SIGNATURE + bytes(rng.getrandbits(8) for _ in range(rng.randrange(64)))
        else:
            mutated = bytearray(valid)
            for _ in range(rng.randrange(1, 6)):
                mutated[rng.randrange(4, len(mutated))] = rng.getrandbits(8)
            data = bytes(mutated[:rng.randrange(4, len(mutated) + 1)])
        try:
            message = decode(data)
        except DecodeError:
            continue
        assert isinstance(message, DecodedMessage)
