import struct
from pathlib import Path

import pytest


def raw_archive(files: list[tuple[bytes, bytes]], table_size: int | None = None) -> bytes:
    table = b"".join(name + b"\x00" + struct.pack("<I", len(data)) for name, data in files)
    size = len(table) if table_size is None else table_size

    return b"VXBG" + struct.pack("<I", size) + table + b"".join(data for _, data in files)


@pytest.fixture
def make_archive(tmp_path: Path):
    def factory(files, name="test.syb", table_size=None) -> Path:
        path = tmp_path / name
        path.write_bytes(raw_archive(files, table_size))
        return path

    return factory


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "source"
    path.mkdir()

    (path / "music.mp3").write_bytes(b"ID3" + bytes(range(256)) * 4)
    (path / "voice_01.wav").write_bytes(b"RIFF" + b"\x01" * 300)
    (path / "voice.wav").write_bytes(b"RIFF" + b"\x02" * 200)
    (path / "intro.jpg").write_bytes(b"\xff\xd8" + b"\x03" * 50)
    (path / "readme.txt").write_bytes(b"hello")
    (path / "empty.dat").write_bytes(b"")

    return path
