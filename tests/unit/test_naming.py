"""Unit tests for storage and stream names."""

from msgparser.naming import (
    attachment_storage_name,
    recipient_storage_name,
    substg_name,
)
from msgparser.model import PropertyTag


def test_indexed_storage_names_use_eight_hex_digits() -> None:
    assert recipient_storage_name(0) == "__recip_version1.0_#00000000"
    assert attachment_storage_name(26) == "__attach_version1.0_#0000001A"


def test_substg_names() -> None:
    assert substg_name(0x0037, 0x001F) == "__substg1.0_0037001F"
    assert substg_name(0x8001, 0x101F, 2) == "__substg1.0_8001101F-00000002"


def test_property_tag_stream_name_and_value() -> None:
    tag = PropertyTag.from_int(0x3701000D)

    assert tag == PropertyTag(0x3701, 0x000D)
    assert tag.value == 0x3701000D
    assert tag.stream_name == "__substg1.0_3701000D"
    assert tag.name == "ATTACH_DATA_BIN"
