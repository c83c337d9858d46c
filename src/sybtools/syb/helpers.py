from io import BufferedReader, BufferedWriter
from pathlib import Path

from sybtools.syb.constants import ARCHIVE_SUFFIXES, CHUNK_SIZE, EXTENSION_PRIORITY
from sybtools.syb.dataclasses.entry import Entry
from sybtools.syb.errors import ArchiveIOError, FormatError, NotFoundError

UNDERSCORE = ord("_")


def extension_rank(extension: bytes) -> int:
    return EXTENSION_PRIORITY.get(extension, len(EXTENSION_PRIORITY))


def name_sort_key(name: bytes) -> tuple[tuple[bool, int], ...]:
    # "_" sorts after every other byte, the rest compare as usual
    return tuple((byte == UNDERSCORE, byte) for byte in name)


def entry_sort_key(
    entry: Entry, extension_order: dict[bytes, int]
) -> tuple[int, int, tuple[tuple[bool, int], ...]]:
    """Orders entries the way the game's own archives are laid out.

    .mp3 comes first, then .wav, then .jpg. Other extensions stay grouped
    in the order they first appear. Entries sharing an extension are
    ordered by name, with underscores pushed back.
    """
    rank = extension_rank(entry.extension)
    group = extension_order[entry.extension] if rank == len(EXTENSION_PRIORITY) else 0

    return rank, group, name_sort_key(entry.name)


def sort_entries(entries: list[Entry]) -> list[Entry]:
    extension_order: dict[bytes, int] = {}

    for entry in entries:
        extension_order.setdefault(entry.extension, len(extension_order))

    return sorted(entries, key=lambda entry: entry_sort_key(entry, extension_order))


def copy_stream(
    reader: BufferedReader,
    writer: BufferedWriter,
    size: int,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Copies up to `size` bytes and returns how many were actually copied."""
    remaining_bytes = size

    while remaining_bytes > 0:
        chunk = reader.read(min(remaining_bytes, chunk_size))

        if not chunk:
            break

        writer.write(chunk)
        remaining_bytes -= len(chunk)

    return size - remaining_bytes


def prepare_output_dir(output_dir: Path):
    if output_dir.exists():
        if not output_dir.is_dir():
            raise ArchiveIOError(f"Output path should be a directory: {output_dir}")
        return

    try:
        output_dir.mkdir(parents=True)
    except OSError as e:
        raise ArchiveIOError(
            f"Couldn't create an output directory {output_dir}: {e.strerror}"
        ) from e


def validate_archive_path(archive_path: Path):
    if not archive_path.exists():
        raise NotFoundError(f"Specified input SYB-file wasn't found: {archive_path}")

    if archive_path.is_dir():
        raise ArchiveIOError(f"Specified input path is a directory: {archive_path}")

    if archive_path.suffix not in ARCHIVE_SUFFIXES:
        raise FormatError(f"Specified input path is not a SYB-file: {archive_path}")


def validate_pack_paths(input_dir: Path, output_path: Path) -> bool:
    """Checks pack arguments, returns True when an existing file gets overwritten."""
    if not input_dir.exists():
        raise NotFoundError(f"Specified input directory wasn't found: {input_dir}")

    if not input_dir.is_dir():
        raise ArchiveIOError(f"Specified input path is not a directory: {input_dir}")

    if output_path.is_dir():
        raise ArchiveIOError(f"Specified output file is a directory: {output_path}")

    return output_path.exists()
