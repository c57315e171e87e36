import logging

from . import naming
from .config import get_settings
from .errors import MalformedHeader
from .model import FileAttachment, MsgAttachment
from .properties import read_entity_properties

logger = logging.getLogger(__name__)


def is_embedded_message(directory):
    # An attached object storage means the attachment is a whole message,
    # whatever other streams sit next to it.
    return directory.has_entry(naming.EMBEDDED_MESSAGE_MARKER)


def parse_file_attachment(directory, settings=None):
    attachment = FileAttachment()
    read_entity_properties(directory, attachment, settings)
    return attachment


def parse_embedded_message(directory, settings=None, depth=0):
    from .stream import parse_directory

    storage = directory.get_entry(naming.EMBEDDED_MESSAGE_MARKER)
    if not storage.is_dir:
        raise MalformedHeader(
            "{} in {} is not a storage".format(naming.EMBEDDED_MESSAGE_MARKER, directory.name))

    attachment = MsgAttachment(message=parse_directory(storage, settings, depth + 1))
    read_entity_properties(directory, attachment, settings)
    return attachment


def parse_attachment(directory, settings=None, depth=0):
    """
    Build the attachment stored in an ``__attach_version1.0_#`` storage.
    Attached .msg files become a MsgAttachment holding the nested message;
    everything else is a FileAttachment.
    """
    settings = settings or get_settings()
    if is_embedded_message(directory):
        logger.debug("{} holds an embedded message".format(directory.name))
        return parse_embedded_message(directory, settings, depth)
    return parse_file_attachment(directory, settings)
