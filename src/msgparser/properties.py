"""Property stream decoding.

Every storage of a .msg file holds a ``__properties_version1.0`` stream: a
header followed by 16-byte property records. A record is a four byte tag
(type in the low word, id in the high word), four bytes of flags and an
eight byte value slot. Fixed-size values live in the slot itself; for
everything else the slot holds a size and the value sits in a
``__substg1.0_`` stream next to the property stream.
"""

import logging
import struct
from typing import NamedTuple

from . import naming
from .config import get_settings
from .errors import (
    MalformedHeader,
    MissingAuxiliaryStream,
    TruncatedRecord,
    UnknownPropertyType,
)
from .model import PropertyTag
from .types import code_pages, property_ids
from .value_loaders import (
    OBJECT,
    FixedLengthValueLoader,
    MultiValueLoader,
    property_types,
)

logger = logging.getLogger(__name__)

RECORD = struct.Struct("<II8s")
COUNTERS = struct.Struct("<4I")
RESERVED_SIZE = 8
ROOT_PADDING_SIZE = 8

BODY_ID = property_ids["BODY"]
INTERNET_CPID_ID = property_ids["INTERNET_CPID"]
MESSAGE_CODEPAGE_ID = property_ids["MESSAGE_CODEPAGE"]


class DirectoryHeader(NamedTuple):
    next_recipient_id: int
    next_attachment_id: int
    recipient_count: int
    attachment_count: int


def read_header(stream, is_root):
    """Read a message header, leaving the stream at the first property record.

    Message headers carry eight reserved bytes and four counters; the root
    message pads them with eight more reserved bytes.
    """
    required = RESERVED_SIZE + COUNTERS.size + (ROOT_PADDING_SIZE if is_root else 0)
    if stream.remaining() < required:
        raise MalformedHeader(
            "{} holds {} bytes, message header needs {}".format(stream.name, stream.remaining(), required))

    stream.skip(RESERVED_SIZE)
    header = DirectoryHeader(*COUNTERS.unpack(stream.read(COUNTERS.size)))
    if is_root:
        stream.skip(ROOT_PADDING_SIZE)
    return header


def skip_entity_header(stream):
    """Skip the reserved header of a recipient or attachment property stream."""
    if stream.skip(RESERVED_SIZE) < RESERVED_SIZE:
        raise MalformedHeader("{} is shorter than its {} byte header".format(stream.name, RESERVED_SIZE))


class RawProperty(NamedTuple):
    """A property record whose value bytes are read but not yet decoded."""

    tag: PropertyTag
    loader: object
    data: object

    @property
    def is_fixed(self):
        return self.loader is None or isinstance(self.loader, FixedLengthValueLoader)

    def load(self, encodings=(), fallback_encoding=None):
        if self.loader is None:
            return self.data
        if isinstance(self.loader, OBJECT):
            return None
        if isinstance(self.loader, FixedLengthValueLoader):
            return self.loader.load(self.data)
        kwargs = {"encodings": encodings}
        if fallback_encoding:
            kwargs["fallback_encoding"] = fallback_encoding
        return self.loader.load(self.data, **kwargs)


def _read_auxiliary(directory, stream_name, settings):
    entry = directory.get_entry(stream_name) if directory.has_entry(stream_name) else None
    if entry is None or not entry.is_file:
        if settings.missing_stream_policy == "skip":
            logger.error("stream missing {} in {}".format(stream_name, directory.name))
            return None
        raise MissingAuxiliaryStream(stream_name, directory.name)
    with entry.open_stream() as stream:
        return stream.read()


def _loader_for(tag):
    try:
        return property_types[tag.type]
    except KeyError:
        raise UnknownPropertyType(tag.type) from None


def read_property(stream, directory, settings=None):
    """Read one property record and the auxiliary streams it refers to.

    Returns None when the record is dropped under the ``skip`` missing
    stream policy.
    """
    settings = settings or get_settings()

    record = stream.read(RECORD.size)
    if len(record) < RECORD.size:
        raise TruncatedRecord(
            "{} ends {} bytes into a {} byte property record".format(stream.name, len(record), RECORD.size))
    tag_value, _flags, slot = RECORD.unpack(record)
    tag = PropertyTag.from_int(tag_value)

    try:
        loader = _loader_for(tag)
    except UnknownPropertyType as e:
        logger.warning("{} for property 0x{:04X}, keeping raw bytes".format(e, tag.id))
        return RawProperty(tag, None, slot)

    if isinstance(loader, FixedLengthValueLoader):
        return RawProperty(tag, loader, slot)

    if isinstance(loader, OBJECT):
        # The value is a storage; embedded messages are read by the builder.
        if not directory.has_entry(tag.stream_name):
            if settings.missing_stream_policy == "skip":
                logger.error("storage missing {} in {}".format(tag.stream_name, directory.name))
                return None
            raise MissingAuxiliaryStream(tag.stream_name, directory.name)
        return RawProperty(tag, loader, None)

    data = _read_auxiliary(directory, tag.stream_name, settings)
    if data is None:
        return None

    if isinstance(loader, MultiValueLoader) and loader.is_variable:
        elements = []
        for index in range(len(loader.lengths(data))):
            element = _read_auxiliary(directory, naming.substg_name(tag.id, tag.type, index), settings)
            if element is None:
                return None
            elements.append(element)
        data = elements

    return RawProperty(tag, loader, data)


def _encodings(entity):
    # The encoding of the "BODY" (and HTML body) properties, then the
    # encoding of "string properties of the message object".
    body_encoding = code_pages.get(entity.get(INTERNET_CPID_ID))
    properties_encoding = code_pages.get(entity.get(MESSAGE_CODEPAGE_ID))
    return body_encoding, properties_encoding


def decode_property(stream, directory, encodings=(), settings=None):
    """Decode exactly one property record into a ``(tag, value)`` pair."""
    settings = settings or get_settings()
    raw = read_property(stream, directory, settings)
    if raw is None:
        return None
    return raw.tag, raw.load(encodings, settings.fallback_encoding)


def walk_properties(stream, directory, entity, settings=None):
    """Decode property records until *stream* is exhausted.

    Each value is applied to *entity* with ``set_property``. Fixed-size
    values are applied first so that 8-bit strings can be decoded with the
    code pages the same stream declares. Returns the number of records read.
    """
    settings = settings or get_settings()

    records = []
    count = 0
    while stream.remaining() > 0:
        raw = read_property(stream, directory, settings)
        count += 1
        if raw is not None:
            records.append(raw)

    for raw in records:
        if raw.is_fixed:
            entity.set_property(raw.tag, raw.load())

    # The code page properties may be wrong. Fall back to the other
    # property if present.
    body_encoding, properties_encoding = _encodings(entity)
    for raw in records:
        if raw.is_fixed:
            continue
        encodings = [body_encoding, properties_encoding] if raw.tag.id == BODY_ID \
            else [properties_encoding, body_encoding]
        entity.set_property(raw.tag, raw.load(encodings, settings.fallback_encoding))

    logger.debug("read {} properties from {} in {}".format(count, stream.name, directory.name))
    return count


def read_entity_properties(directory, entity, settings=None):
    """Populate a recipient or attachment from its storage's property stream."""
    with open_property_stream(directory) as stream:
        skip_entity_header(stream)
        walk_properties(stream, directory, entity, settings)
    return entity


def open_property_stream(directory):
    try:
        entry = directory.get_entry(naming.PROPERTIES_STREAM)
    except KeyError:
        raise MalformedHeader(
            "{} has no {} stream".format(directory.name, naming.PROPERTIES_STREAM)) from None
    if not entry.is_file:
        raise MalformedHeader("{} in {} is not a stream".format(naming.PROPERTIES_STREAM, directory.name))
    return entry.open_stream()
