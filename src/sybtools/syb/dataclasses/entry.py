import os
from dataclasses import dataclass, field
from pathlib import Path

from sybtools.syb.constants import SIZE_FIELD_LENGTH


@dataclass
class Entry:
    name: bytes
    size: int
    source: Path | None = field(default=None, compare=False, repr=False)

    @property
    def extension(self) -> bytes:
        # ".hidden" has no extension, same as os.path.splitext
        return os.path.splitext(self.name)[1]

    @property
    def table_size(self) -> int:
        return len(self.name) + 1 + SIZE_FIELD_LENGTH

    @property
    def display_name(self) -> str:
        return self.name.decode("utf-8", errors="replace")
