"""Exceptions raised while decoding .msg property streams."""

from compoundfiles import CompoundFileError

# The container layer reports structural problems with its own exception;
# it is re-exported under this name and never wrapped.
ContainerFormatError = CompoundFileError


class MsgParseError(Exception):
    """Base exception for all property stream decoding errors."""


class MalformedHeader(MsgParseError):
    """A property stream header, or a storage it promises, is missing or short."""


class TruncatedRecord(MsgParseError):
    """A property record ended before all of its bytes were read."""


class MissingAuxiliaryStream(MsgParseError):
    """The stream holding a variable-length value does not exist."""

    def __init__(self, stream_name, directory_name=None):
        self.stream_name = stream_name
        self.directory_name = directory_name
        message = "stream missing {}".format(stream_name)
        if directory_name:
            message += " in {}".format(directory_name)
        super().__init__(message)


class UnknownPropertyType(MsgParseError):
    """A property record uses a type code with no known decoding.

    This is never fatal: the decoder logs it and keeps the raw bytes.
    """

    def __init__(self, property_type):
        self.property_type = property_type
        super().__init__("unhandled property type {}".format(hex(property_type)))


class NestingTooDeep(MsgParseError):
    """Embedded messages are nested deeper than the configured limit."""
