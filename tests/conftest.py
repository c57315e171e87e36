"""Pytest configuration and shared fixtures.

Containers are assembled in memory from ``Directory`` and ``Document``
entries laid out the way Outlook lays out a .msg file.
"""

import struct
from datetime import datetime, timezone

import pytest

from msgparser.config import Settings
from msgparser.container import Directory, Document
from msgparser.naming import (
    EMBEDDED_MESSAGE_MARKER,
    PROPERTIES_STREAM,
    attachment_storage_name,
    recipient_storage_name,
    substg_name,
)

FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)

SECTOR_SIZE = 512
FREE_SECTOR = 0xFFFFFFFF
END_OF_CHAIN = 0xFFFFFFFE
FAT_SECTOR = 0xFFFFFFFD
NO_STREAM = 0xFFFFFFFF
COMPOUND_HEADER = struct.Struct("<8s16sHHHHH6sLLLLLLLLL")
DIR_ENTRY = struct.Struct("<64sHBBLLL16sLQQLLL")


def record(property_id, property_type, slot=b"", flags=0x6):
    """One 16-byte property record."""
    tag = (property_id << 16) | property_type
    return struct.pack("<II", tag, flags) + slot.ljust(8, b"\0")[:8]


def compound_file(root):
    """Serialize a ``Directory`` tree as a version 3 compound file.

    Every stream is a normal stream (the mini stream cutoff is zero) and
    siblings hang off each other's right link. Streams must not be empty.
    """
    entries = []
    streams = []

    def add(entry, entry_type):
        index = len(entries)
        entries.append({"name": entry.name, "type": entry_type, "right": NO_STREAM,
                        "child": NO_STREAM, "stream": None, "size": 0})
        if entry.is_dir:
            children = [add(child, 1 if child.is_dir else 2) for child in entry]
            for left, right in zip(children, children[1:]):
                entries[left]["right"] = right
            if children:
                entries[index]["child"] = children[0]
        else:
            data = entry.read_bytes()
            entries[index]["stream"] = len(streams)
            entries[index]["size"] = len(data)
            streams.append(data)
        return index

    add(root, 5)

    per_sector = SECTOR_SIZE // DIR_ENTRY.size
    dir_sectors = -(-len(entries) // per_sector)
    fat = [FAT_SECTOR] + list(range(2, dir_sectors + 1)) + [END_OF_CHAIN]
    starts = []
    for data in streams:
        count = -(-len(data) // SECTOR_SIZE)
        starts.append(len(fat))
        fat.extend(range(len(fat) + 1, len(fat) + count))
        fat.append(END_OF_CHAIN)
    assert len(fat) <= SECTOR_SIZE // 4

    directory = b""
    for entry in entries:
        name = entry["name"].encode("utf-16-le") + b"\0\0"
        if entry["type"] == 5:
            start = END_OF_CHAIN
        elif entry["type"] == 1:
            start = 0
        else:
            start = starts[entry["stream"]]
        directory += DIR_ENTRY.pack(
            name.ljust(64, b"\0"), len(name), entry["type"], 1, NO_STREAM, entry["right"],
            entry["child"], b"\0" * 16, 0, 0, 0, start, entry["size"], 0)
    unused = DIR_ENTRY.pack(b"", 0, 0, 0, NO_STREAM, NO_STREAM, NO_STREAM, b"\0" * 16, 0, 0, 0, 0, 0, 0)
    directory += unused * (dir_sectors * per_sector - len(entries))

    header = COMPOUND_HEADER.pack(
        b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1", b"\0" * 16, 0x3E, 3, 0xFFFE, 9, 6, b"\0" * 6,
        0, 1, 1, 0, 0, END_OF_CHAIN, 0, END_OF_CHAIN, 0)
    header += struct.pack("<109L", 0, END_OF_CHAIN, *[FREE_SECTOR] * 107)
    fat += [FREE_SECTOR] * (SECTOR_SIZE // 4 - len(fat))

    body = struct.pack("<{}L".format(len(fat)), *fat) + directory
    for data in streams:
        body += data.ljust(-(-len(data) // SECTOR_SIZE) * SECTOR_SIZE, b"\0")
    return header + body


class StorageBuilder:
    """Builds a recipient or attachment storage (8-byte header)."""

    def __init__(self, name):
        self.name = name
        self.records = []
        self.entries = []

    def fixed(self, property_id, property_type, slot):
        self.records.append(record(property_id, property_type, slot))
        return self

    def int32(self, property_id, value):
        return self.fixed(property_id, 0x0003, struct.pack("<i", value))

    def boolean(self, property_id, value):
        return self.fixed(property_id, 0x000B, struct.pack("<H", 1 if value else 0))

    def time(self, property_id, value):
        ticks = int((value - FILETIME_EPOCH).total_seconds()) * 10000000
        return self.fixed(property_id, 0x0040, struct.pack("<Q", ticks))

    def variable(self, property_id, property_type, data, with_stream=True):
        self.records.append(record(property_id, property_type, struct.pack("<I", len(data))))
        if with_stream:
            self.entries.append(Document(substg_name(property_id, property_type), data))
        return self

    def unicode(self, property_id, text, with_stream=True):
        return self.variable(property_id, 0x001F, text.encode("utf-16-le") + b"\0\0", with_stream)

    def string8(self, property_id, data):
        return self.variable(property_id, 0x001E, data + b"\0")

    def binary(self, property_id, data):
        return self.variable(property_id, 0x0102, data)

    def stream(self, name, data=b""):
        self.entries.append(Document(name, data))
        return self

    def child(self, directory):
        self.entries.append(directory)
        return self

    def header(self):
        return b"\0" * 8

    def build(self):
        directory = Directory(self.name)
        directory.add(Document(PROPERTIES_STREAM, self.header() + b"".join(self.records)))
        for entry in self.entries:
            directory.add(entry)
        return directory


class MessageBuilder(StorageBuilder):
    """Builds a message storage: the container root or an embedded message."""

    def __init__(self, name="Root Entry", root=True):
        super().__init__(name)
        self.root = root
        self.recipients = []
        self.attachments = []
        self.recipient_count = None
        self.attachment_count = None

    def recipient(self, name, email, recipient_type=1):
        storage = StorageBuilder(recipient_storage_name(len(self.recipients)))
        storage.unicode(0x3001, name).unicode(0x39FE, email).int32(0x0C15, recipient_type)
        self.recipients.append(storage.build())
        return self

    def file_attachment(self, filename, data, mime_type=None, extra=None):
        storage = StorageBuilder(attachment_storage_name(len(self.attachments)))
        storage.unicode(0x3707, filename).binary(0x3701, data).int32(0x3705, 1)
        if mime_type:
            storage.unicode(0x370E, mime_type)
        if extra:
            extra(storage)
        self.attachments.append(storage.build())
        return self

    def embedded_message(self, message_builder, display_name="Forwarded", extra=None):
        storage = StorageBuilder(attachment_storage_name(len(self.attachments)))
        storage.unicode(0x3001, display_name).int32(0x3705, 5)
        storage.fixed(0x3701, 0x000D, struct.pack("<I", 0))
        message_builder.name = EMBEDDED_MESSAGE_MARKER
        message_builder.root = False
        storage.child(message_builder.build())
        if extra:
            extra(storage)
        self.attachments.append(storage.build())
        return self

    def header(self):
        recipients = len(self.recipients) if self.recipient_count is None else self.recipient_count
        attachments = len(self.attachments) if self.attachment_count is None else self.attachment_count
        data = b"\0" * 8 + struct.pack("<4I", len(self.recipients), len(self.attachments), recipients, attachments)
        if self.root:
            data += b"\0" * 8
        return data

    def build(self):
        directory = super().build()
        for storage in self.recipients + self.attachments:
            directory.add(storage)
        return directory


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, missing_stream_policy="raise", max_nesting_depth=32)


@pytest.fixture
def skip_settings():
    return Settings(_env_file=None, missing_stream_policy="skip")


@pytest.fixture
def message_builder():
    return MessageBuilder


@pytest.fixture
def storage_builder():
    return StorageBuilder


@pytest.fixture
def make_record():
    return record


@pytest.fixture
def sample_message(message_builder):
    """A root message with two recipients, a file and a forwarded message."""
    inner = message_builder()
    inner.unicode(0x0037, "Inner subject").recipient("Carol", "carol@example.com")
    inner.file_attachment("notes.txt", b"inner notes", "text/plain")

    outer = message_builder()
    outer.unicode(0x0037, "Quarterly report")
    outer.unicode(0x0C1A, "Alice")
    outer.unicode(0x5D01, "alice@example.com")
    outer.unicode(0x1000, "Please find the report attached.")
    outer.time(0x0E06, datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))
    outer.recipient("Bob", "bob@example.com", 1)
    outer.recipient("Dave", "dave@example.com", 2)
    outer.file_attachment("report.pdf", b"%PDF-1.4 report", "application/pdf")
    outer.embedded_message(inner)
    return outer.build()


@pytest.fixture
def make_compound_file():
    return compound_file
