"""
Command-line interface tests
"""

from pytnefkit import PropertyTag, PropertyType, TnefAttribute
from pytnefkit.cli import main

from tnef_builder import (attachment, message_record, prop, prop_list, sized, tnef, utf16z)


def write_sample(tmp_path):
    filepath = tmp_path / "winmail.dat"
    filepath.write_bytes(tnef(
        message_record(TnefAttribute.MESSAGE_CLASS, b'IPM.Note\x00'),
        message_record(TnefAttribute.MAPI_PROPS, prop_list(
            prop(PropertyType.PT_UNICODE, PropertyTag.PR_BODY, sized(utf16z('Hello'))),
            prop(PropertyType.PT_BINARY, PropertyTag.PR_HTML, sized(b'<p>Hello</p>')),
        )),
        attachment(b'AUTHORS\x00', b'Jane Doe\n'),
        attachment(b'..\\..\\evil.txt\x00', b'nope'),
        attachment(b'\x00', b'untitled'),
    ))
    return filepath


def test_list(tmp_path, capsys):
    filepath = write_sample(tmp_path)

    assert main([str(filepath)]) == 0

    out = capsys.readouterr().out
    assert "Message class: IPM.Note" in out
    assert "Attachments: 3" in out
    assert "AUTHORS (9 bytes)" in out


def test_extract(tmp_path):
    filepath = write_sample(tmp_path)
    output = tmp_path / "out"

    assert main([str(filepath), "-o", str(output), "--body"]) == 0

    assert (output / "AUTHORS").read_bytes() == b'Jane Doe\n'
    assert (output / "evil.txt").read_bytes() == b'nope'
    assert (output / "attachment-3").read_bytes() == b'untitled'
    assert (output / "body.html").read_bytes() == b'<p>Hello</p>'
    assert (output / "body.txt").read_bytes() == b'Hello'
    assert not (tmp_path / "evil.txt").exists()


def test_extract_does_not_overwrite(tmp_path):
    filepath = write_sample(tmp_path)
    output = tmp_path / "out"
    output.mkdir()
    (output / "AUTHORS").write_bytes(b'existing')

    assert main([str(filepath), "-o", str(output)]) == 0

    assert (output / "AUTHORS").read_bytes() == b'existing'
    assert (output / "AUTHORS-1").read_bytes() == b'Jane Doe\n'


def test_not_tnef(tmp_path, capsys):
    filepath = tmp_path / "plain.txt"
    filepath.write_bytes(b'just some text')

    assert main([str(filepath)]) == 1
    assert "not a valid TNEF file" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.dat")]) == 1
    assert "cannot read" in capsys.readouterr().err
