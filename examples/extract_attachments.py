"""
Extract every attachment of a winmail.dat into a directory
"""

import sys
from pathlib import Path

from pytnefkit import DecodeError, decode_file


def main():
    if len(sys.argv) != 3:
        print("usage: extract_attachments.py WINMAIL.DAT OUTPUT_DIR")
        return 1

    try:
        message = decode_file(sys.argv[1])
    except DecodeError as e:
        print(f"Not a TNEF file: {e}")
        return 1

    output = Path(sys.argv[2])
    output.mkdir(parents=True, exist_ok=True)

    for n, attachment in enumerate(message.attachments):
        if attachment.data is None:
            continue
        name = Path(attachment.long_filename() or f"attachment-{n + 1}").name
        (output / name).write_bytes(attachment.data)
        print(f"✓ {name} ({len(attachment.data)} bytes)")

    return 0


if __name__ == "__main__":
    sys.exit(main())
