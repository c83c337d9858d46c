from io import BufferedReader

from sybtools.syb.constants import MAX_NAME_LENGTH, SIZE_FIELD_LENGTH
from sybtools.syb.dataclasses.entry import Entry
from sybtools.syb.enumerators.table_field import TableField
from sybtools.syb.errors import FatalInvariantError, FormatError


class FileInfoTableParser:
    """Incremental parser for the file-info table of a SYB archive.

    The table has no entry count, so it is consumed byte by byte,
    alternating between a zero-terminated name and a little-endian u32 size.
    """

    def __init__(self):
        self.__field = TableField.FILE_NAME
        self.__name = bytearray()
        self.__size = bytearray()

        self.__entries: list[Entry] = []

    @property
    def field(self) -> TableField:
        return self.__field

    @property
    def entries(self) -> list[Entry]:
        return self.__entries

    @property
    def at_entry_boundary(self) -> bool:
        return self.__field == TableField.FILE_NAME and not self.__name

    def feed(self, data: bytes):
        for byte in data:
            match self.__field:
                case TableField.FILE_NAME:
                    self.__read_name_byte(byte)
                case TableField.FILE_SIZE:
                    self.__read_size_byte(byte)

    def finish(self) -> list[Entry]:
        if not self.at_entry_boundary:
            raise FormatError(
                f"File-info table ends in the middle of an entry "
                f"(while reading its {self.__field.value}). Archive may be corrupted."
            )

        return self.__entries

    def __read_name_byte(self, byte: int):
        if byte == 0:
            self.__field = TableField.FILE_SIZE
            return

        if len(self.__name) >= MAX_NAME_LENGTH:
            raise FatalInvariantError(
                f"Entry name exceeds {MAX_NAME_LENGTH} bytes: "
                f"{bytes(self.__name[:32])!r}..."
            )

        self.__name.append(byte)

    def __read_size_byte(self, byte: int):
        self.__size.append(byte)

        if len(self.__size) == SIZE_FIELD_LENGTH:
            self.__entries.append(
                Entry(
                    name=bytes(self.__name),
                    size=int.from_bytes(self.__size, "little"),
                )
            )

            self.__name.clear()
            self.__size.clear()
            self.__field = TableField.FILE_NAME


def read_file_info_table(reader: BufferedReader, table_size: int) -> list[Entry]:
    data = reader.read(table_size)

    if len(data) != table_size:
        raise FormatError(
            f"Unexpected end of file while reading file-info table. "
            f"Expected {table_size} bytes, but got {len(data)} bytes."
        )

    parser = FileInfoTableParser()
    parser.feed(data)

    return parser.finish()


def build_file_info_table(entries: list[Entry]) -> bytes:
    return b"".join(
        entry.name + b"\x00" + entry.size.to_bytes(SIZE_FIELD_LENGTH, "little")
        for entry in entries
    )
