import errno
import hashlib
import os

import brotli
import pytest

from filemanager import fs_ops
from filemanager.errors import OperationFailedError
from filemanager.schemas import PathKind


def _payload() -> bytes:
    return os.urandom(50_000) + b"repeat me " * 20_000


@pytest.mark.asyncio
async def test_compress_then_decompress_restores_bytes(tmp_path):
    data = _payload()
    src = tmp_path / "data.bin"
    src.write_bytes(data)
    packed = tmp_path / "data.br"
    restored = tmp_path / "restored.bin"

    await fs_ops.compress_file(src, packed, quality=5, chunk_size=4096)
    await fs_ops.decompress_file(packed, restored, chunk_size=1000)

    assert restored.read_bytes() == data
    assert src.read_bytes() == data
    # plain Brotli stream, readable by any Brotli decoder
    assert brotli.decompress(packed.read_bytes()) == data


@pytest.mark.asyncio
async def test_decompress_then_compress_round_trip(tmp_path):
    data = b"hello brotli\n" * 100
    packed = tmp_path / "in.br"
    packed.write_bytes(brotli.compress(data))
    plain = tmp_path / "plain.txt"
    repacked = tmp_path / "again.br"

    await fs_ops.decompress_file(packed, plain)
    await fs_ops.compress_file(plain, repacked)

    assert brotli.decompress(repacked.read_bytes()) == data


@pytest.mark.asyncio
async def test_decompress_garbage_fails_and_leaves_no_output(tmp_path):
    src = tmp_path / "junk.br"
    src.write_bytes(b"this is not brotli at all" * 10)
    dst = tmp_path / "out.txt"
    with pytest.raises(OperationFailedError):
        await fs_ops.decompress_file(src, dst)
    assert not dst.exists()


@pytest.mark.asyncio
async def test_decompress_truncated_stream_fails(tmp_path):
    packed = brotli.compress(os.urandom(20_000))
    src = tmp_path / "cut.br"
    src.write_bytes(packed[: len(packed) // 2])
    dst = tmp_path / "out.bin"
    with pytest.raises(OperationFailedError):
        await fs_ops.decompress_file(src, dst)
    assert not dst.exists()


@pytest.mark.asyncio
async def test_hash_matches_hashlib_and_detects_change(tmp_path):
    f = tmp_path / "a.txt"
    f.write_bytes(b"abc" * 1000)
    first = await fs_ops.hash_file(f, chunk_size=7)
    second = await fs_ops.hash_file(f)
    assert first == second == hashlib.sha256(b"abc" * 1000).hexdigest()

    f.write_bytes(b"abc" * 999 + b"abd")
    assert await fs_ops.hash_file(f) != first


@pytest.mark.asyncio
async def test_copy_refuses_existing_destination(tmp_path):
    src = tmp_path / "a.txt"
    src.write_text("a", encoding="utf-8")
    dst = tmp_path / "b.txt"
    dst.write_text("keep", encoding="utf-8")
    with pytest.raises(OperationFailedError):
        await fs_ops.copy_file(src, dst)
    assert dst.read_text(encoding="utf-8") == "keep"


@pytest.mark.asyncio
async def test_move_copies_then_removes_source(tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"\x00\x01payload")
    (tmp_path / "sub").mkdir()
    dst = tmp_path / "sub" / "a.txt"
    await fs_ops.move_file(src, dst)
    assert not src.exists()
    assert dst.read_bytes() == b"\x00\x01payload"


@pytest.mark.asyncio
async def test_stream_file_emits_all_chunks(tmp_path):
    f = tmp_path / "big.txt"
    f.write_bytes(b"x" * 10_001)
    chunks = []
    await fs_ops.stream_file(f, chunks.append, chunk_size=1000)
    assert len(chunks) == 11
    assert b"".join(chunks) == b"x" * 10_001


@pytest.mark.asyncio
async def test_list_directory_orders_dirs_first(tmp_path):
    (tmp_path / "b.txt").write_text("", encoding="utf-8")
    (tmp_path / "a.txt").write_text("", encoding="utf-8")
    (tmp_path / "zdir").mkdir()
    (tmp_path / "cdir").mkdir()
    entries = await fs_ops.list_directory(tmp_path)
    assert entries == [
        ("cdir", PathKind.DIRECTORY),
        ("zdir", PathKind.DIRECTORY),
        ("a.txt", PathKind.FILE),
        ("b.txt", PathKind.FILE),
    ]


@pytest.mark.asyncio
async def test_missing_source_is_operation_failed(tmp_path):
    with pytest.raises(OperationFailedError) as exc_info:
        await fs_ops.hash_file(tmp_path / "missing.txt")
    assert str(exc_info.value).startswith("Operation failed:")
    assert "missing.txt" in str(exc_info.value)
    assert exc_info.value.args == (str(exc_info.value),)


@pytest.mark.asyncio
async def test_rename_across_filesystems_falls_back_to_copy(tmp_path, monkeypatch):
    src = tmp_path / "a.txt"
    src.write_bytes(b"payload")
    dst = tmp_path / "b.txt"

    def cross_device(*args, **kwargs):
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(os, "rename", cross_device)
    await fs_ops.rename_file(src, dst)
    assert not src.exists()
    assert dst.read_bytes() == b"payload"
