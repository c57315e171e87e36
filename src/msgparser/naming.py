"""Names of the storages and streams inside a .msg container."""

PROPERTIES_STREAM = "__properties_version1.0"

RECIPIENT_PREFIX = "__recip_version1.0_#"
ATTACHMENT_PREFIX = "__attach_version1.0_#"
SUBSTG_PREFIX = "__substg1.0_"

# PR_ATTACH_DATA_OBJ with type PT_OBJECT: present only in attachment
# storages whose content is a complete message.
EMBEDDED_MESSAGE_MARKER = "__substg1.0_3701000D"


def indexed_name(prefix, index):
    return "{}{:08X}".format(prefix, index)


def recipient_storage_name(index):
    return indexed_name(RECIPIENT_PREFIX, index)


def attachment_storage_name(index):
    return indexed_name(ATTACHMENT_PREFIX, index)


def substg_name(property_id, property_type, index=None):
    """Name of the stream holding a variable-length property value.

    Elements of multi-valued variable-length properties live in sibling
    streams carrying the element index as a suffix.
    """
    name = "{}{:04X}{:04X}".format(SUBSTG_PREFIX, property_id, property_type)
    if index is not None:
        name += "-{:08X}".format(index)
    return name
