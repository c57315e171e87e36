"""Property type codes, well-known property tags and code pages.

References:

https://learn.microsoft.com/en-us/openspecs/exchange_server_protocols/ms-oxcdata
https://learn.microsoft.com/en-us/openspecs/exchange_server_protocols/ms-oxprops
"""

import enum

MULTI_VALUE_FLAG = 0x1000


class PropertyType(enum.IntEnum):
    NULL = 0x0001
    INTEGER16 = 0x0002
    INTEGER32 = 0x0003
    FLOAT = 0x0004
    DOUBLE = 0x0005
    CURRENCY = 0x0006
    APPTIME = 0x0007
    ERROR = 0x000A
    BOOLEAN = 0x000B
    OBJECT = 0x000D
    INTEGER64 = 0x0014
    STRING8 = 0x001E
    UNICODE = 0x001F
    SYSTIME = 0x0040
    CLSID = 0x0048
    BINARY = 0x0102

    MV_INTEGER16 = 0x1002
    MV_INTEGER32 = 0x1003
    MV_FLOAT = 0x1004
    MV_DOUBLE = 0x1005
    MV_CURRENCY = 0x1006
    MV_APPTIME = 0x1007
    MV_INTEGER64 = 0x1014
    MV_STRING8 = 0x101E
    MV_UNICODE = 0x101F
    MV_SYSTIME = 0x1040
    MV_CLSID = 0x1048
    MV_BINARY = 0x1102

    @property
    def is_multi_value(self):
        return bool(self & MULTI_VALUE_FLAG)


_STRING = PropertyType.UNICODE
_BINARY = PropertyType.BINARY
_INT = PropertyType.INTEGER32
_BOOL = PropertyType.BOOLEAN
_TIME = PropertyType.SYSTIME

# property id -> (name, usual type)
property_tags = {
    0x0001: ("ACKNOWLEDGEMENT_MODE", _INT),
    0x0002: ("ALTERNATE_RECIPIENT_ALLOWED", _BOOL),
    0x0017: ("IMPORTANCE", _INT),
    0x001A: ("MESSAGE_CLASS", _STRING),
    0x0023: ("ORIGINATOR_DELIVERY_REPORT_REQUESTED", _BOOL),
    0x0026: ("PRIORITY", _INT),
    0x0029: ("READ_RECEIPT_REQUESTED", _BOOL),
    0x002E: ("ORIGINAL_SENSITIVITY", _INT),
    0x0036: ("SENSITIVITY", _INT),
    0x0037: ("SUBJECT", _STRING),
    0x0039: ("CLIENT_SUBMIT_TIME", _TIME),
    0x003B: ("SENT_REPRESENTING_SEARCH_KEY", _BINARY),
    0x003D: ("SUBJECT_PREFIX", _STRING),
    0x0040: ("RECEIVED_BY_NAME", _STRING),
    0x0041: ("SENT_REPRESENTING_ENTRYID", _BINARY),
    0x0042: ("SENT_REPRESENTING_NAME", _STRING),
    0x0047: ("MESSAGE_SUBMISSION_ID", _BINARY),
    0x0064: ("SENT_REPRESENTING_ADDRTYPE", _STRING),
    0x0065: ("SENT_REPRESENTING_EMAIL_ADDRESS", _STRING),
    0x0070: ("CONVERSATION_TOPIC", _STRING),
    0x0071: ("CONVERSATION_INDEX", _BINARY),
    0x0075: ("RECEIVED_BY_ADDRTYPE", _STRING),
    0x0076: ("RECEIVED_BY_EMAIL_ADDRESS", _STRING),
    0x007D: ("TRANSPORT_MESSAGE_HEADERS", _STRING),
    0x007F: ("TNEF_CORRELATION_KEY", _BINARY),
    0x0C15: ("RECIPIENT_TYPE", _INT),
    0x0C19: ("SENDER_ENTRYID", _BINARY),
    0x0C1A: ("SENDER_NAME", _STRING),
    0x0C1D: ("SENDER_SEARCH_KEY", _BINARY),
    0x0C1E: ("SENDER_ADDRTYPE", _STRING),
    0x0C1F: ("SENDER_EMAIL_ADDRESS", _STRING),
    0x0E01: ("DELETE_AFTER_SUBMIT", _BOOL),
    0x0E02: ("DISPLAY_BCC", _STRING),
    0x0E03: ("DISPLAY_CC", _STRING),
    0x0E04: ("DISPLAY_TO", _STRING),
    0x0E06: ("MESSAGE_DELIVERY_TIME", _TIME),
    0x0E07: ("MESSAGE_FLAGS", _INT),
    0x0E08: ("MESSAGE_SIZE", _INT),
    0x0E1B: ("HASATTACH", _BOOL),
    0x0E1D: ("NORMALIZED_SUBJECT", _STRING),
    0x0E1F: ("RTF_IN_SYNC", _BOOL),
    0x0E20: ("ATTACH_SIZE", _INT),
    0x0E21: ("ATTACH_NUM", _INT),
    0x0FF9: ("RECORD_KEY", _BINARY),
    0x0FFE: ("OBJECT_TYPE", _INT),
    0x0FFF: ("ENTRYID", _BINARY),
    0x1000: ("BODY", _STRING),
    0x1009: ("RTF_COMPRESSED", _BINARY),
    0x1013: ("HTML", _BINARY),
    0x1035: ("INTERNET_MESSAGE_ID", _STRING),
    0x1039: ("INTERNET_REFERENCES", _STRING),
    0x1042: ("IN_REPLY_TO_ID", _STRING),
    0x1080: ("ICON_INDEX", _INT),
    0x3001: ("DISPLAY_NAME", _STRING),
    0x3002: ("ADDRTYPE", _STRING),
    0x3003: ("EMAIL_ADDRESS", _STRING),
    0x3007: ("CREATION_TIME", _TIME),
    0x3008: ("LAST_MODIFICATION_TIME", _TIME),
    0x300B: ("SEARCH_KEY", _BINARY),
    0x3701: ("ATTACH_DATA_BIN", _BINARY),
    0x3702: ("ATTACH_ENCODING", _BINARY),
    0x3703: ("ATTACH_EXTENSION", _STRING),
    0x3704: ("ATTACH_FILENAME", _STRING),
    0x3705: ("ATTACH_METHOD", _INT),
    0x3707: ("ATTACH_LONG_FILENAME", _STRING),
    0x3708: ("ATTACH_PATHNAME", _STRING),
    0x370B: ("RENDERING_POSITION", _INT),
    0x370E: ("ATTACH_MIME_TAG", _STRING),
    0x3712: ("ATTACH_CONTENT_ID", _STRING),
    0x3713: ("ATTACH_CONTENT_LOCATION", _STRING),
    0x3714: ("ATTACH_FLAGS", _INT),
    0x3716: ("ATTACH_CONTENT_DISPOSITION", _STRING),
    0x39FE: ("SMTP_ADDRESS", _STRING),
    0x3A00: ("ACCOUNT", _STRING),
    0x3A20: ("TRANSMITABLE_DISPLAY_NAME", _STRING),
    0x3FDE: ("INTERNET_CPID", _INT),
    0x3FF1: ("MESSAGE_LOCALE_ID", _INT),
    0x3FF8: ("CREATOR_NAME", _STRING),
    0x3FFA: ("LAST_MODIFIER_NAME", _STRING),
    0x3FFD: ("MESSAGE_CODEPAGE", _INT),
    0x5D01: ("SENDER_SMTP_ADDRESS", _STRING),
    0x5D02: ("SENT_REPRESENTING_SMTP_ADDRESS", _STRING),
    0x5FF6: ("RECIPIENT_DISPLAY_NAME", _STRING),
    0x5FFF: ("RECIPIENT_FLAGS", _INT),
}

property_ids = {name: property_id for property_id, (name, _) in property_tags.items()}

# Windows code page -> Python codec
code_pages = {
    37: "cp037",
    437: "cp437",
    850: "cp850",
    852: "cp852",
    866: "cp866",
    874: "cp874",
    932: "cp932",
    936: "gbk",
    949: "cp949",
    950: "cp950",
    1200: "utf-16-le",
    1250: "cp1250",
    1251: "cp1251",
    1252: "cp1252",
    1253: "cp1253",
    1254: "cp1254",
    1255: "cp1255",
    1256: "cp1256",
    1257: "cp1257",
    1258: "cp1258",
    10000: "mac_roman",
    20127: "ascii",
    20866: "koi8_r",
    21866: "koi8_u",
    28591: "iso8859_1",
    28592: "iso8859_2",
    28593: "iso8859_3",
    28594: "iso8859_4",
    28595: "iso8859_5",
    28596: "iso8859_6",
    28597: "iso8859_7",
    28598: "iso8859_8",
    28599: "iso8859_9",
    28603: "iso8859_13",
    28605: "iso8859_15",
    50220: "iso2022_jp",
    51932: "euc_jp",
    51949: "euc_kr",
    52936: "hz",
    54936: "gb18030",
    65000: "utf_7",
    65001: "utf-8",
}
