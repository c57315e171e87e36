"""Navigable view of an OLE compound document.

The parser only needs a small part of what a compound file offers: named
storages (directories), named streams (documents) and the ability to read a
stream front to back. :func:`open_container` provides that over
:mod:`compoundfiles`; :class:`Directory` and :class:`Document` can also be
assembled by hand to describe a container held in memory.
"""

import io
import logging
import os
import struct

import compoundfiles

from .errors import ContainerFormatError

logger = logging.getLogger(__name__)


class ByteStream(object):
    """Sequential reader over the content of one document."""

    def __init__(self, data, name=None):
        self._data = bytes(data)
        self._pos = 0
        self.name = name
        self.closed = False

    def read(self, size=-1):
        # Short reads near the end are the caller's business.
        if size is None or size < 0:
            size = self.remaining()
        chunk = self._data[self._pos:self._pos + size]
        self._pos += len(chunk)
        return chunk

    def skip(self, size):
        """Advance the cursor by up to *size* bytes; return how many were skipped."""
        skipped = min(size, self.remaining())
        self._pos += skipped
        return skipped

    def tell(self):
        return self._pos

    def remaining(self):
        return len(self._data) - self._pos

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return "<ByteStream name={!r} pos={} size={}>".format(
            self.name, self._pos, len(self._data))


class Entry(object):
    is_dir = False
    is_file = False

    def __init__(self, name):
        self.name = name
        self.parent = None


class Document(Entry):
    """A stream entry. Its bytes are read with :meth:`open_stream`."""

    is_file = True

    def __init__(self, name, data=b""):
        super().__init__(name)
        self._data = bytes(data)

    @property
    def size(self):
        return len(self._data)

    def read_bytes(self):
        return self._data

    def open_stream(self):
        return ByteStream(self.read_bytes(), self.name)

    def __repr__(self):
        return "<Document name={!r} size={}>".format(self.name, self.size)


class Directory(Entry):
    """A storage entry holding named child entries.

    Names compare case-insensitively, as they do in the container format.
    A directory without a parent is the root of its container.
    """

    is_dir = True

    def __init__(self, name, entries=()):
        super().__init__(name)
        self._entries = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry):
        entry.parent = self
        self._entries[entry.name.lower()] = entry
        return entry

    def get_entry(self, name):
        try:
            return self._entries[name.lower()]
        except KeyError:
            raise KeyError(name) from None

    def has_entry(self, name):
        return name.lower() in self._entries

    def __iter__(self):
        return iter(list(self._entries.values()))

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return "<Directory name={!r} entries={}>".format(self.name, len(self))


class CompoundDocument(Document):
    """A document whose bytes are read lazily from a compound file."""

    def __init__(self, reader, entity):
        super().__init__(entity.name)
        self._reader = reader
        self._entity = entity

    @property
    def size(self):
        return self._entity.size

    def read_bytes(self):
        with self._reader.open(self._entity) as stream:
            return stream.read()


class Container(object):
    """An open compound file and the directory tree it contains."""

    def __init__(self, reader):
        self._reader = reader
        self.root = self._wrap_storage(reader.root)

    def _wrap_storage(self, entity):
        directory = Directory(entity.name)
        for child in entity:
            if child.isdir:
                directory.add(self._wrap_storage(child))
            elif child.isfile:
                directory.add(CompoundDocument(self._reader, child))
            else:
                logger.debug("ignoring entry {!r} of unknown kind".format(child.name))
        return directory

    def close(self):
        self._reader.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def open_container(source):
    """Open a compound file from a path, a byte string or a binary file object."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    elif isinstance(source, os.PathLike):
        source = os.fspath(source)

    try:
        reader = compoundfiles.CompoundFileReader(source)
    except struct.error as e:
        # The fixed file header could not even be unpacked.
        raise ContainerFormatError("truncated compound file header: {}".format(e)) from e

    try:
        return Container(reader)
    except BaseException:
        reader.close()
        raise
