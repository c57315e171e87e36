from datetime import datetime, timedelta, timezone
from decimal import Decimal
import math
import struct
import uuid

from .errors import TruncatedRecord
from .types import PropertyType

FALLBACK_ENCODING = "cp1252"

FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)


def _number(value):
    # NaN never compares equal, not even to itself.
    return None if math.isnan(value) else value


class FixedLengthValueLoader(object):
    # Number of meaningful bytes at the start of the eight-byte value slot,
    # and the element stride inside multi-valued streams.
    size = 8


class NULL(FixedLengthValueLoader):
    size = 0

    @staticmethod
    def load(value):
        # value is an eight-byte long bytestring with unused content.
        return None


class BOOLEAN(FixedLengthValueLoader):
    size = 2

    @staticmethod
    def load(value):
        # value is an eight-byte long bytestring holding a two-byte integer.
        return struct.unpack_from("<H", value)[0] != 0


class INTEGER16(FixedLengthValueLoader):
    size = 2

    @staticmethod
    def load(value):
        return struct.unpack_from("<h", value)[0]


class INTEGER32(FixedLengthValueLoader):
    size = 4

    @staticmethod
    def load(value):
        return struct.unpack_from("<i", value)[0]


class ERROR(FixedLengthValueLoader):
    size = 4

    @staticmethod
    def load(value):
        # An SCODE, kept as the unsigned 32-bit code.
        return struct.unpack_from("<I", value)[0]


class FLOAT(FixedLengthValueLoader):
    size = 4

    @staticmethod
    def load(value):
        return _number(struct.unpack_from("<f", value)[0])


class DOUBLE(FixedLengthValueLoader):
    @staticmethod
    def load(value):
        return _number(struct.unpack_from("<d", value)[0])


class CURRENCY(FixedLengthValueLoader):
    @staticmethod
    def load(value):
        # A 64-bit integer scaled by 10,000.
        return Decimal(struct.unpack_from("<q", value)[0]) / 10000


class APPTIME(FixedLengthValueLoader):
    @staticmethod
    def load(value):
        # A double counting days since December 30, 1899, kept as is.
        return _number(struct.unpack_from("<d", value)[0])


class INTEGER64(FixedLengthValueLoader):
    @staticmethod
    def load(value):
        return struct.unpack_from("<q", value)[0]


class INTTIME(FixedLengthValueLoader):
    @staticmethod
    def load(value):
        # value is an eight-byte long bytestring encoding the integer number of
        # 100-nanosecond intervals since January 1, 1601.
        value = struct.unpack_from("<Q", value)[0]
        try:
            value = FILETIME_EPOCH + timedelta(microseconds=value // 10)
        except OverflowError:
            value = None

        return value


class VariableLengthValueLoader(object):
    pass


class BINARY(VariableLengthValueLoader):
    @staticmethod
    def load(value, **kwargs):
        # value is a bytestring. Just return it.
        return value


class STRING8(VariableLengthValueLoader):
    @staticmethod
    def load(value, encodings=(), fallback_encoding=FALLBACK_ENCODING, **kwargs):
        # Value is a "bytestring" and encodings is a list of Python
        # codecs to try. If all fail, try the fallback codec with
        # character replacement so that this never fails.
        value = value.rstrip(b"\x00")
        for encoding in encodings:
            if encoding is None:
                continue
            try:
                return value.decode(encoding=encoding, errors="strict")
            except (UnicodeDecodeError, LookupError):
                # Try the next one.
                pass
        return value.decode(encoding=fallback_encoding, errors="replace")


class UNICODE(VariableLengthValueLoader):
    @staticmethod
    def load(value, **kwargs):
        # value is a bytestring encoded in UTF-16.
        decoded = value.decode("utf-16-le", errors="replace")
        return decoded.rstrip("\x00")


class CLSID(VariableLengthValueLoader):
    size = 16

    @staticmethod
    def load(value, **kwargs):
        if len(value) < 16:
            raise TruncatedRecord("CLSID value holds {} bytes".format(len(value)))
        return uuid.UUID(bytes_le=bytes(value[:16]))


class OBJECT(object):
    """An attached object: the value is a storage, not a stream."""


class MultiValueLoader(object):
    """Loads multi-valued properties by delegating each element."""

    def __init__(self, element):
        self.element = element

    @property
    def is_variable(self):
        # Strings and binaries keep each element in its own stream.
        return isinstance(self.element, (BINARY, STRING8, UNICODE))

    @property
    def length_entry_size(self):
        # The length table of multi-valued binaries carries a reserved
        # four bytes after each length.
        return 8 if isinstance(self.element, BINARY) else 4

    def lengths(self, table):
        stride = self.length_entry_size
        if len(table) % stride:
            raise TruncatedRecord(
                "length table of {} bytes is not a multiple of {}".format(len(table), stride))
        return [struct.unpack_from("<I", table, offset)[0] for offset in range(0, len(table), stride)]

    def load(self, value, **kwargs):
        if self.is_variable:
            # value is a list of bytestrings, one per element stream.
            return [self.element.load(item, **kwargs) for item in value]

        size = self.element.size
        if len(value) % size:
            raise TruncatedRecord(
                "multi-valued stream of {} bytes is not a multiple of {}".format(len(value), size))
        return [self.element.load(value[offset:offset + size]) for offset in range(0, len(value), size)]


property_types = {
    PropertyType.NULL: NULL(),
    PropertyType.INTEGER16: INTEGER16(),
    PropertyType.INTEGER32: INTEGER32(),
    PropertyType.FLOAT: FLOAT(),
    PropertyType.DOUBLE: DOUBLE(),
    PropertyType.CURRENCY: CURRENCY(),
    PropertyType.APPTIME: APPTIME(),
    PropertyType.ERROR: ERROR(),
    PropertyType.BOOLEAN: BOOLEAN(),
    PropertyType.OBJECT: OBJECT(),
    PropertyType.INTEGER64: INTEGER64(),
    PropertyType.STRING8: STRING8(),
    PropertyType.UNICODE: UNICODE(),
    PropertyType.SYSTIME: INTTIME(),
    PropertyType.CLSID: CLSID(),
    PropertyType.BINARY: BINARY(),
}

for _base in (
    PropertyType.INTEGER16,
    PropertyType.INTEGER32,
    PropertyType.FLOAT,
    PropertyType.DOUBLE,
    PropertyType.CURRENCY,
    PropertyType.APPTIME,
    PropertyType.INTEGER64,
    PropertyType.STRING8,
    PropertyType.UNICODE,
    PropertyType.SYSTIME,
    PropertyType.CLSID,
    PropertyType.BINARY,
):
    property_types[PropertyType(_base | 0x1000)] = MultiValueLoader(property_types[_base])
del _base
