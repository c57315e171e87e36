"""Read Microsoft Outlook .msg files."""

from .config import Settings, get_settings
from .container import Directory, Document, open_container
from .errors import (
    ContainerFormatError,
    MalformedHeader,
    MissingAuxiliaryStream,
    MsgParseError,
    NestingTooDeep,
    TruncatedRecord,
    UnknownPropertyType,
)
from .model import FileAttachment, Message, MsgAttachment, PropertyTag, Recipient
from .stream import parse_directory, parse_message
from .types import PropertyType

__version__ = "0.1.0"

__all__ = [
    "ContainerFormatError",
    "Directory",
    "Document",
    "FileAttachment",
    "MalformedHeader",
    "Message",
    "MissingAuxiliaryStream",
    "MsgAttachment",
    "MsgParseError",
    "NestingTooDeep",
    "PropertyTag",
    "PropertyType",
    "Recipient",
    "Settings",
    "TruncatedRecord",
    "UnknownPropertyType",
    "get_settings",
    "open_container",
    "parse_directory",
    "parse_message",
]
