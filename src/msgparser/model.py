"""In-memory representation of a parsed .msg file.

A :class:`Message` owns its recipients and attachments. An attachment is
either a :class:`FileAttachment` or a :class:`MsgAttachment` wrapping a
complete nested :class:`Message`. Properties are keyed by
:class:`PropertyTag`; the decoded Python value's kind follows the tag's
property type.
"""

from dataclasses import dataclass, field
import email.parser
import email.policy
import os.path
from typing import NamedTuple, Optional, Union

from . import body
from .naming import substg_name
from .types import PropertyType, code_pages, property_ids, property_tags

RECIPIENT_TYPES = {1: "to", 2: "cc", 3: "bcc"}


class PropertyTag(NamedTuple):
    id: int
    type: int

    @classmethod
    def from_int(cls, value):
        # On disk the type is the low word and the id the high word.
        return cls(value >> 16, value & 0xFFFF)

    @property
    def value(self):
        return (self.id << 16) | self.type

    @property
    def name(self):
        try:
            return property_tags[self.id][0]
        except KeyError:
            return None

    @property
    def property_type(self):
        try:
            return PropertyType(self.type)
        except ValueError:
            return None

    @property
    def stream_name(self):
        return substg_name(self.id, self.type)

    def __repr__(self):
        return "PropertyTag({}, 0x{:08X})".format(self.name or "?", self.value)


TagLike = Union[PropertyTag, str, int]


@dataclass
class PropertyHolder:
    properties: dict = field(default_factory=dict)

    def set_property(self, tag: PropertyTag, value) -> None:
        # Last write wins for repeated tags.
        self.properties[tag] = value

    def find_tag(self, key: TagLike) -> Optional[PropertyTag]:
        """Return the stored tag matching a tag, a symbolic name or a property id."""
        if isinstance(key, PropertyTag):
            return key if key in self.properties else None
        if isinstance(key, str):
            property_id = property_ids.get(key.upper())
            if property_id is None:
                return None
        else:
            property_id = key
        for tag in self.properties:
            if tag.id == property_id:
                return tag
        return None

    def get(self, key: TagLike, default=None):
        tag = self.find_tag(key)
        if tag is None:
            return default
        return self.properties[tag]

    def __contains__(self, key):
        return self.find_tag(key) is not None

    def named_properties(self) -> dict:
        """Properties keyed by symbolic name, or by hex tag where unnamed."""
        return {tag.name or "0x{:08X}".format(tag.value): value for tag, value in self.properties.items()}

    def _text(self, *names) -> Optional[str]:
        for name in names:
            value = self.get(name)
            if isinstance(value, bytes):
                value = value.decode("utf-8", errors="replace")
            if value:
                return value
        return None


@dataclass
class Recipient(PropertyHolder):
    @property
    def name(self):
        return self._text("DISPLAY_NAME", "RECIPIENT_DISPLAY_NAME", "TRANSMITABLE_DISPLAY_NAME")

    @property
    def email(self):
        smtp = self._text("SMTP_ADDRESS")
        if smtp:
            return smtp
        return self._text("EMAIL_ADDRESS")

    @property
    def address_type(self):
        return self._text("ADDRTYPE")

    @property
    def recipient_type(self):
        value = self.get("RECIPIENT_TYPE")
        if value is None:
            return None
        return RECIPIENT_TYPES.get(value & 0x0F)


@dataclass
class FileAttachment(PropertyHolder):
    @property
    def filename(self):
        filename = self._text("ATTACH_LONG_FILENAME", "ATTACH_FILENAME", "DISPLAY_NAME")
        if filename is None:
            return None
        # Outlook stores Windows paths now and then.
        return os.path.basename(filename.replace("\\", "/"))

    @property
    def extension(self):
        extension = self._text("ATTACH_EXTENSION")
        if extension is None and self.filename:
            extension = os.path.splitext(self.filename)[1] or None
        return extension

    @property
    def mime_type(self):
        return self._text("ATTACH_MIME_TAG") or "application/octet-stream"

    @property
    def content_id(self):
        return self._text("ATTACH_CONTENT_ID")

    @property
    def data(self) -> Optional[bytes]:
        value = self.get("ATTACH_DATA_BIN")
        if isinstance(value, str):
            return value.encode("utf-8")
        return value

    @property
    def size(self):
        data = self.data
        return len(data) if data is not None else 0


@dataclass
class Message(PropertyHolder):
    recipients: list = field(default_factory=list)
    attachments: list = field(default_factory=list)

    def add_recipient(self, recipient: Recipient) -> None:
        self.recipients.append(recipient)

    def add_attachment(self, attachment) -> None:
        self.attachments.append(attachment)

    def walk(self):
        """Yield this message and every nested message, depth first."""
        yield self
        for attachment in self.attachments:
            if isinstance(attachment, MsgAttachment):
                yield from attachment.message.walk()

    @property
    def subject(self):
        return self._text("SUBJECT", "CONVERSATION_TOPIC", "NORMALIZED_SUBJECT")

    @property
    def message_class(self):
        return self._text("MESSAGE_CLASS")

    @property
    def message_id(self):
        return self._text("INTERNET_MESSAGE_ID")

    @property
    def sender_name(self):
        return self._text("SENDER_NAME", "SENT_REPRESENTING_NAME")

    @property
    def sender_email(self):
        smtp = self._text("SENDER_SMTP_ADDRESS")
        if smtp:
            return smtp
        return self._text("SENDER_EMAIL_ADDRESS", "SENT_REPRESENTING_EMAIL_ADDRESS")

    @property
    def display_to(self):
        return self._text("DISPLAY_TO")

    @property
    def display_cc(self):
        return self._text("DISPLAY_CC")

    @property
    def display_bcc(self):
        return self._text("DISPLAY_BCC")

    @property
    def date(self):
        value = self.get("MESSAGE_DELIVERY_TIME")
        if value is None:
            value = self.get("CLIENT_SUBMIT_TIME")
        return value

    @property
    def headers(self):
        """Transport headers as an :class:`email.message.EmailMessage`, if present."""
        text = self._text("TRANSPORT_MESSAGE_HEADERS")
        if not text:
            return None
        return email.parser.HeaderParser(policy=email.policy.default).parsestr(text)

    @property
    def internet_encoding(self):
        return code_pages.get(self.get("INTERNET_CPID"))

    @property
    def body_rtf(self) -> Optional[bytes]:
        compressed = self.get("RTF_COMPRESSED")
        if not compressed:
            return None
        return body.decompress_rtf(compressed)

    @property
    def body_html(self) -> Optional[str]:
        html = self.get("HTML")
        if html:
            if isinstance(html, bytes):
                html = html.decode(self.internet_encoding or "utf-8", errors="replace")
            return html
        rtf = self.body_rtf
        if rtf is None:
            return None
        return body.html_from_rtf(rtf)

    @property
    def body_text(self) -> Optional[str]:
        text = self.get("BODY")
        if isinstance(text, bytes):
            text = text.decode(self.internet_encoding or "utf-8", errors="replace")
        if text:
            return text
        html = self.body_html
        if html is None:
            return None
        return body.text_from_html(html)


@dataclass
class MsgAttachment(PropertyHolder):
    message: Message = field(default_factory=Message)

    @property
    def filename(self):
        return self._text("DISPLAY_NAME", "ATTACH_LONG_FILENAME", "ATTACH_FILENAME")
