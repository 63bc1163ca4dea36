"""Command-line interface for pytnefkit."""

import argparse
import logging
import sys
from pathlib import Path

from .decoder import Attachment, DecodedMessage, decode_file
from .exceptions import DecodeError


def _safe_name(attachment: Attachment, index: int) -> str:
    """Attachment file name with any path components stripped."""
    name = attachment.long_filename().replace('\\', '/').split('/')[-1].strip()
    if name in ('', '.', '..'):
        name = f"attachment-{index + 1}"
    return name


def _unique_path(directory: Path, name: str) -> Path:
    path = directory / name
    counter = 1
    while path.exists():
        path = directory / f"{Path(name).stem}-{counter}{Path(name).suffix}"
        counter += 1
    return path


def _print_summary(path: Path, message: DecodedMessage):
    message_class = (message.message_class or b'').decode('latin-1')
    print(f"{path}")
    print(f"  Message class: {message_class or '(none)'}")
    print(f"  Body: {len(message.body or b'')} bytes, "
          f"HTML body: {len(message.body_html or b'')} bytes")
    print(f"  Properties: {len(message.properties)}")
    print(f"  Attachments: {len(message.attachments)}")
    for attachment in message.attachments:
        size = len(attachment.data or b'')
        inline = " [inline]" if message.attachment_is_mime_related(attachment) else ""
        print(f"    - {attachment.long_filename() or '(untitled)'} ({size} bytes){inline}")


def _extract(message: DecodedMessage, output: Path, with_body: bool) -> int:
    output.mkdir(parents=True, exist_ok=True)
    written = 0

    for index, attachment in enumerate(message.attachments):
        if attachment.data is None:
            continue
        target = _unique_path(output, _safe_name(attachment, index))
        target.write_bytes(attachment.data)
        print(f"  + {target}", file=sys.stderr)
        written += 1

    if with_body:
        if message.body_html:
            target = _unique_path(output, "body.html")
            target.write_bytes(message.body_html)
            print(f"  + {target}", file=sys.stderr)
            written += 1
        if message.body:
            target = _unique_path(output, "body.txt")
            target.write_bytes(message.body)
            print(f"  + {target}", file=sys.stderr)
            written += 1

    return written


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='pytnefkit',
        description='List and extract the contents of TNEF (winmail.dat) files.',
    )
    parser.add_argument(
        'input',
        type=Path,
        help='TNEF file to decode',
    )
    parser.add_argument(
        '-o', '--output',
        type=Path,
        default=None,
        help='Directory to write attachment payloads into',
    )
    parser.add_argument(
        '--body',
        action='store_true',
        help='Also write the plain and HTML bodies when extracting',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every decoded record',
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        message = decode_file(args.input)
    except OSError as e:
        print(f"Error: cannot read '{args.input}': {e}", file=sys.stderr)
        return 1
    except DecodeError as e:
        print(f"Error: '{args.input}' is not a valid TNEF file: {e}", file=sys.stderr)
        return 1

    _print_summary(args.input, message)

    if args.output is not None:
        try:
            written = _extract(message, args.output, args.body)
        except OSError as e:
            print(f"Error: cannot write to '{args.output}': {e}", file=sys.stderr)
            return 1
        print(f"\nDone: {written} files written to {args.output}", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
