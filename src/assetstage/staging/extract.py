#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import gzip
import io
import logging
import os
import tarfile
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO

from ..errors import ExtractionError

LOGGER = logging.getLogger("assetstage.extract")

_CHUNK_SIZE = 64 * 1024
_FILE_MODE = 0o644
_STREAM_ERRORS = (tarfile.TarError, zlib.error, EOFError, gzip.BadGzipFile)
# two zero blocks close every POSIX tar archive
_END_MARKER_SIZE = 2 * tarfile.BLOCKSIZE
_TAIL_WINDOW = 4 * tarfile.RECORDSIZE


@dataclass(frozen=True)
class ExtractionWarning:
    entry: str
    message: str

    def __str__(self) -> str:
        return f"{self.entry}: {self.message}"


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of a completed extraction: every file written and the stream closed.

    ``entries_read`` counts every non-directory entry in the archive; each one
    that was not written also carries a warning.
    """

    dest_dir: Path
    files: tuple[Path, ...]
    warnings: tuple[ExtractionWarning, ...]
    entries_read: int = 0

    @property
    def entry_count(self) -> int:
        return len(self.files)

    @property
    def skipped_count(self) -> int:
        return len(self.warnings)


class _TailTrackingReader:
    """File-like view of the decompressed tar stream that keeps its most recent bytes."""

    def __init__(self, raw: IO[bytes], *, window: int = _TAIL_WINDOW) -> None:
        self._raw = raw
        self._window = window
        self._tail = bytearray()
        self._tail_start = 0
        self.position = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._raw.read(size)
        self.position += len(chunk)
        self._tail += chunk
        excess = len(self._tail) - self._window
        if excess > 0:
            del self._tail[:excess]
            self._tail_start += excess
        return chunk

    def peek_back(self, offset: int, size: int) -> bytes:
        start = offset - self._tail_start
        if start < 0:
            raise ExtractionError(f"archive offset {offset} is no longer buffered")
        return bytes(self._tail[start : start + size])


def extract_archive(
    data: bytes,
    dest_dir: str | Path,
    *,
    logger: logging.Logger | None = None,
) -> ExtractionResult:
    """Stream a gzip-compressed tar archive into ``dest_dir``.

    Regular files are written flat under ``dest_dir`` by base name. Entries that
    cannot be staged (links, devices, unsafe or hidden names, write failures) are
    logged and reported as warnings; extraction continues with the next entry.
    A broken compressed stream, a bad gzip trailer, or a tar stream that ends
    without its end-of-archive marker raises ExtractionError.
    """
    log = logger or LOGGER
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("archive data must be bytes")
    target_dir = Path(dest_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ExtractionError(f"cannot create staging directory {target_dir}: {exc}") from exc

    written: dict[Path, None] = {}
    warnings: list[ExtractionWarning] = []
    entries_read = 0

    def _warn(entry: str, message: str) -> None:
        warnings.append(ExtractionWarning(entry=entry, message=message))
        log.warning("Skipping archive entry %s: %s", entry, message)

    try:
        with gzip.GzipFile(fileobj=io.BytesIO(bytes(data)), mode="rb") as decompressed:
            stream = _TailTrackingReader(decompressed)
            with tarfile.open(fileobj=stream, mode="r|") as archive:
                for member in archive:
                    if member.isdir():
                        log.debug("Flattening directory entry %s", member.name)
                        continue
                    entries_read += 1
                    if not member.isfile():
                        _warn(member.name, f"unsupported entry type ({_describe_type(member)})")
                        continue
                    name = _flat_name(member.name)
                    if name is None:
                        _warn(member.name, "unsafe or hidden file name")
                        continue
                    try:
                        path = _write_member(archive, member, target_dir, name)
                    except OSError as exc:
                        _warn(member.name, f"could not be written ({exc})")
                        continue
                    written.pop(path, None)
                    written[path] = None
                    log.debug("Extracted %s (%d bytes)", path.name, member.size)
                end_offset = archive.offset
            _require_end_marker(stream, end_offset)
    except _STREAM_ERRORS as exc:
        raise ExtractionError(f"failed to read archive stream: {exc}") from exc

    return ExtractionResult(
        dest_dir=target_dir,
        files=tuple(written),
        warnings=tuple(warnings),
        entries_read=entries_read,
    )


def _require_end_marker(stream: _TailTrackingReader, offset: int) -> None:
    # tarfile stops quietly at a short or unreadable header after the first
    # member, so the zero blocks must be checked here.
    while stream.position < offset + _END_MARKER_SIZE:
        if not stream.read(tarfile.BLOCKSIZE):
            break
    marker = stream.peek_back(offset, _END_MARKER_SIZE)
    # drain so gzip verifies its CRC and length trailer
    while stream.read(_CHUNK_SIZE):
        pass
    if len(marker) != _END_MARKER_SIZE or marker.count(0) != _END_MARKER_SIZE:
        raise ExtractionError(
            f"archive is truncated or corrupt: no end-of-archive marker at offset {offset}"
        )


def _flat_name(member_name: str) -> str | None:
    name = PurePosixPath(member_name.replace("\\", "/")).name
    if not name or name in {".", ".."} or name.startswith("."):
        return None
    return name


def _describe_type(member: tarfile.TarInfo) -> str:
    if member.issym():
        return "symlink"
    if member.islnk():
        return "hard link"
    if member.ischr() or member.isblk():
        return "device"
    if member.isfifo():
        return "fifo"
    return f"type {member.type!r}"


def _write_member(
    archive: tarfile.TarFile,
    member: tarfile.TarInfo,
    target_dir: Path,
    name: str,
) -> Path:
    source = archive.extractfile(member)
    if source is None:
        raise OSError(f"no data for {member.name}")
    fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".part", dir=target_dir)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            _copy_member(source, handle)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, _FILE_MODE)
        destination = target_dir / name
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return destination


def _copy_member(source: IO[bytes], handle: IO[bytes]) -> None:
    while True:
        try:
            chunk = source.read(_CHUNK_SIZE)
        except _STREAM_ERRORS as exc:
            raise ExtractionError(f"failed to read archive stream: {exc}") from exc
        if not chunk:
            return
        handle.write(chunk)
