"""Upload source staging.

Uploads need a seekable source and an exact byte count. Seekable streams are
used in place; anything else is buffered in memory once.
"""

from __future__ import annotations

import io
import shutil
from contextlib import contextmanager
from dataclasses import dataclass
from typing import BinaryIO, Generator, Union

UploadSource = Union[bytes, bytearray, str, BinaryIO]


@dataclass(frozen=True, slots=True)
class StagedStream:
    stream: BinaryIO
    length: int
    owned: bool


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except ValueError:
        # closed file objects raise instead of answering
        return False


def _remaining_length(stream: BinaryIO) -> int:
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position)
    return max(0, end - position)


class StreamStager:
    """Provides a seekable stream plus the number of bytes left to upload."""

    def __init__(self, chunk_size: int = 64 * 1024) -> None:
        self._chunk_size = chunk_size

    @contextmanager
    def stage(self, source: UploadSource) -> Generator[StagedStream, None, None]:
        """Yield a staged stream; owned buffers are closed on exit.

        The caller's own stream is never closed. A seekable stream keeps its
        current position, so only the bytes after it are uploaded.
        """
        if source is None:
            raise ValueError("source is required")

        if isinstance(source, str):
            source = source.encode("utf-8")

        buffer: io.BytesIO | None = None
        try:
            if isinstance(source, (bytes, bytearray)):
                buffer = io.BytesIO(bytes(source))
                staged = StagedStream(stream=buffer, length=len(source), owned=True)
            elif _is_seekable(source):
                staged = StagedStream(
                    stream=source, length=_remaining_length(source), owned=False
                )
            else:
                buffer = io.BytesIO()
                shutil.copyfileobj(source, buffer, self._chunk_size)
                length = buffer.tell()
                buffer.seek(0)
                staged = StagedStream(stream=buffer, length=length, owned=True)

            yield staged
        finally:
            if buffer is not None:
                buffer.close()
