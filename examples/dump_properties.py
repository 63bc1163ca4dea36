"""
Print the MAPI properties of a winmail.dat message and its attachments
"""

import sys

from pytnefkit import decode_file


def show(properties, indent="  "):
    for prop in properties:
        label = f"{prop.tag_id:#06x}"
        if prop.named is not None:
            label += f" [{prop.named.guid_text} {prop.named.name or hex(prop.named.id)}]"
        value = prop.value
        if isinstance(value, bytes) and len(value) > 32:
            value = value[:32] + b'...'
        print(f"{indent}{label} {prop.kind}: {value!r}")


def main():
    message = decode_file(sys.argv[1])

    print(f"Message class: {(message.message_class or b'').decode('latin-1')}")
    show(message.properties)

    for attachment in message.attachments:
        print(f"Attachment: {attachment.long_filename()}")
        show(attachment.properties, indent="    ")


if __name__ == "__main__":
    main()
