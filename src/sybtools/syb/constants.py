MAGIC = b"VXBG"

HEADER_SIZE = 8  # magic + file-info table size
SIZE_FIELD_LENGTH = 4

CHUNK_SIZE = 10 * 1024

MAX_NAME_LENGTH = 127
MAX_ENTRY_SIZE = 0xFFFFFFFF
MAX_TABLE_SIZE = 0xFFFFFFFF

# Lower rank is packed first, anything not listed shares the last rank
EXTENSION_PRIORITY = {
    b".mp3": 0,
    b".wav": 1,
    b".jpg": 2,
}

ARCHIVE_SUFFIXES = (".syb", ".SYB")
