#! /usr/bin/env python

# This module prints the structure of Microsoft Outlook .msg files:
# subject, sender, recipients, attachments and any messages nested
# inside attachments.
#
# References:
#
# https://learn.microsoft.com/en-us/openspecs/exchange_server_protocols/ms-oxmsg
# https://blogs.msdn.microsoft.com/openspecification/2009/11/06/msg-file-format-part-1/

import logging
import sys

from .config import get_settings
from .errors import ContainerFormatError, MsgParseError
from .model import MsgAttachment
from .stream import parse_message

logger = logging.getLogger(__name__)


def describe(msg, indent=0):
  pad = "  " * indent
  lines = [
    "{}Subject: {}".format(pad, msg.subject or ""),
    "{}From: {} <{}>".format(pad, msg.sender_name or "", msg.sender_email or ""),
  ]
  if msg.date is not None:
    lines.append("{}Date: {}".format(pad, msg.date.isoformat()))
  for recipient in msg.recipients:
    lines.append("{}{}: {} <{}>".format(
      pad, (recipient.recipient_type or "to").upper(), recipient.name or "", recipient.email or ""))
  for attachment in msg.attachments:
    if isinstance(attachment, MsgAttachment):
      lines.append("{}Attached message: {}".format(pad, attachment.filename or ""))
      lines.extend(describe(attachment.message, indent + 1))
    else:
      lines.append("{}Attachment: {} ({}, {} bytes)".format(
        pad, attachment.filename or "", attachment.mime_type, attachment.size))
  return lines


# COMMAND-LINE ENTRY POINT

def main(argv=None):
  settings = get_settings()
  logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s:%(funcName)s:%(lineno)s - %(levelname)s - %(message)s')
  args = sys.argv[1:] if argv is None else argv

  # If no command-line arguments are given, read the .msg file
  # from STDIN.
  if not args:
    msg = parse_message(sys.stdin.buffer.read(), settings)
    print("\n".join(describe(msg)))
    return 0

  # Otherwise describe each file mentioned on the command-line.
  failures = 0
  for fn in args:
    print(fn + "...")
    try:
      msg = parse_message(fn, settings)
    except (OSError, ContainerFormatError, MsgParseError) as e:
      logger.error("Could not parse {}: {}".format(fn, str(e)))
      failures += 1
      continue
    print("\n".join(describe(msg, 1)))
  return 1 if failures else 0

if __name__ == "__main__":
  sys.exit(main())
