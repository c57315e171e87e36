import logging

from . import naming
from .attachments import parse_attachment
from .config import get_settings
from .container import open_container
from .errors import MalformedHeader, NestingTooDeep
from .model import Message, Recipient
from .properties import open_property_stream, read_entity_properties, read_header, walk_properties

logger = logging.getLogger(__name__)


def parse_message(source, settings=None):
    """Parse a .msg file given as a path, a byte string or a binary file object."""
    settings = settings or get_settings()
    with open_container(source) as container:
        return parse_directory(container.root, settings)


def parse_recipient(directory, settings=None):
    recipient = Recipient()
    read_entity_properties(directory, recipient, settings)
    return recipient


def _child_storage(directory, name):
    # The header counters promise these storages.
    if not directory.has_entry(name):
        raise MalformedHeader("{} has no {} storage".format(directory.name, name))
    entry = directory.get_entry(name)
    if not entry.is_dir:
        raise MalformedHeader("{} in {} is not a storage".format(name, directory.name))
    return entry


def parse_directory(directory, settings=None, depth=0):
    """Build a Message from a message storage.

    The storage is the container root for a top-level message, or the
    attached object storage of an embedded message.
    """
    settings = settings or get_settings()
    if depth > settings.max_nesting_depth:
        raise NestingTooDeep(
            "embedded messages nested deeper than {}".format(settings.max_nesting_depth))

    message = Message()
    with open_property_stream(directory) as stream:
        header = read_header(stream, directory.parent is None)
        logger.debug("{}: {} recipients, {} attachments".format(
            directory.name, header.recipient_count, header.attachment_count))

        for index in range(header.recipient_count):
            storage = _child_storage(directory, naming.recipient_storage_name(index))
            message.add_recipient(parse_recipient(storage, settings))

        for index in range(header.attachment_count):
            storage = _child_storage(directory, naming.attachment_storage_name(index))
            message.add_attachment(parse_attachment(storage, settings, depth))

        # Recipients and attachments were read from their own streams; the
        # message's properties follow the header in this one.
        walk_properties(stream, directory, message, settings)

    return message
