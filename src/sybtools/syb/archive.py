import os
from io import BufferedReader, BufferedWriter
from pathlib import Path

from rich.markup import escape
from rich.progress import Progress

from sybtools.syb.constants import (
    CHUNK_SIZE,
    HEADER_SIZE,
    MAGIC,
    MAX_ENTRY_SIZE,
    MAX_NAME_LENGTH,
    MAX_TABLE_SIZE,
    SIZE_FIELD_LENGTH,
)
from sybtools.syb.dataclasses.entry import Entry
from sybtools.syb.errors import ArchiveIOError, FatalInvariantError, FormatError
from sybtools.syb.helpers import (
    copy_stream,
    prepare_output_dir,
    sort_entries,
    validate_archive_path,
    validate_pack_paths,
)
from sybtools.syb.table import build_file_info_table, read_file_info_table

UNSAFE_NAMES = (b"", b".", b"..")


class Archive:

    def __init__(self, archive_path: Path | None = None):
        self.__entries: list[Entry] = []

        if archive_path is not None:
            with archive_path.open("rb") as f:
                self.load(f)

    @property
    def entries(self) -> list[Entry]:
        return self.__entries

    @property
    def table_size(self) -> int:
        return sum(entry.table_size for entry in self.__entries)

    @property
    def payload_size(self) -> int:
        return sum(entry.size for entry in self.__entries)

    @property
    def offsets(self) -> list[int]:
        result = []
        offset = HEADER_SIZE + self.table_size

        for entry in self.__entries:
            result.append(offset)
            offset += entry.size

        return result

    def load(self, reader: BufferedReader):
        """Reads the header and file-info table, leaving `reader` at the first payload."""
        magic = reader.read(len(MAGIC))

        if magic != MAGIC:
            raise FormatError(
                f"Wrong magic {magic.hex(' ')!r}, expected {MAGIC.hex(' ')!r}. "
                f"Input is not a SYB archive."
            )

        raw_table_size = reader.read(SIZE_FIELD_LENGTH)

        if len(raw_table_size) != SIZE_FIELD_LENGTH:
            raise FormatError("Unexpected end of file while reading archive header.")

        table_size = int.from_bytes(raw_table_size, "little")
        self.__entries = read_file_info_table(reader, table_size)

    def get_output_path(self, entry: Entry, output_dir: Path) -> Path:
        if entry.name in UNSAFE_NAMES or b"/" in entry.name or b"\\" in entry.name:
            raise FormatError(f"Refusing to extract entry with unsafe name {entry.name!r}")

        return output_dir / os.fsdecode(entry.name)

    def extract(
        self,
        reader: BufferedReader,
        entry: Entry,
        output_path: Path,
        chunk_size: int = CHUNK_SIZE,
    ):
        # Payloads have no offsets, so entries must be extracted in table order
        with output_path.open("wb") as out_file:
            copied = copy_stream(reader, out_file, entry.size, chunk_size)

        if copied != entry.size:
            raise FormatError(
                f"Unexpected end of file while reading {entry.display_name}. "
                f"Expected {entry.size} bytes, but got {copied} bytes."
            )

    def add_file(self, path: Path) -> Entry:
        name = os.fsencode(path.name)
        size = path.stat().st_size

        if len(name) > MAX_NAME_LENGTH:
            raise FatalInvariantError(
                f"File name {path.name!r} is {len(name)} bytes long, "
                f"at most {MAX_NAME_LENGTH} bytes are supported."
            )

        if size > MAX_ENTRY_SIZE:
            raise FormatError(
                f"File {path.name!r} is {size} bytes long, "
                f"at most {MAX_ENTRY_SIZE} bytes are supported."
            )

        entry = Entry(name=name, size=size, source=path)
        self.__entries.append(entry)

        return entry

    def add_directory(self, input_dir: Path, exclude: Path | None = None) -> list[Path]:
        """Adds every regular file directly inside `input_dir`, returns skipped paths."""
        skipped = []
        excluded = exclude.resolve() if exclude is not None else None

        for path in sorted(input_dir.iterdir()):
            if excluded is not None and path.resolve() == excluded:
                skipped.append(path)
            elif path.is_file():
                self.add_file(path)
            else:
                skipped.append(path)

        return skipped

    def sort(self):
        self.__entries = sort_entries(self.__entries)

    def build_header(self) -> bytes:
        table_size = self.table_size

        if table_size > MAX_TABLE_SIZE:
            raise FormatError(f"File-info table is too large ({table_size} bytes).")

        return (
            MAGIC
            + table_size.to_bytes(SIZE_FIELD_LENGTH, "little")
            + build_file_info_table(self.__entries)
        )

    def write_payload(
        self, writer: BufferedWriter, entry: Entry, chunk_size: int = CHUNK_SIZE
    ):
        if entry.source is None:
            raise ArchiveIOError(f"Entry {entry.display_name} has no source file")

        with entry.source.open("rb") as f:
            copied = copy_stream(f, writer, entry.size, chunk_size)

        if copied != entry.size:
            raise ArchiveIOError(
                f"Unexpected end of file while reading {entry.source}. "
                f"Expected {entry.size} bytes, but got {copied} bytes."
            )


def log(progress: Progress | None, message: str):
    if progress is not None:
        progress.console.log(message)


def unpack_archive(
    archive_path: Path,
    output_dir: Path,
    progress: Progress | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    validate_archive_path(archive_path)

    with archive_path.open("rb") as f:
        archive = Archive()
        archive.load(f)

        prepare_output_dir(output_dir)

        entries = archive.entries

        if progress is not None:
            entries = progress.track(entries, description="Extracting files...")

        for entry in entries:
            output_path = archive.get_output_path(entry, output_dir)

            log(progress, f"Extracting {escape(entry.display_name)}...")

            archive.extract(f, entry, output_path, chunk_size)

    return len(archive.entries)


def pack_directory(
    input_dir: Path,
    output_path: Path,
    progress: Progress | None = None,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    if validate_pack_paths(input_dir, output_path):
        log(
            progress,
            "[yellow]Warning:[/yellow] Specified output file exists! "
            "It will be rewritten!",
        )

    archive = Archive()

    for path in archive.add_directory(input_dir, exclude=output_path):
        log(progress, f"[yellow]Warning:[/yellow] Skipping {escape(path.name)}")

    archive.sort()
    header = archive.build_header()

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("wb") as f:
        f.write(header)

        entries = archive.entries

        if progress is not None:
            entries = progress.track(entries, description="Packing files...")

        for entry in entries:
            log(progress, f"Adding file: {escape(entry.display_name)}...")

            archive.write_payload(f, entry, chunk_size)

    return len(archive.entries)
