# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import asyncio
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from io import BytesIO
from os import PathLike
from typing import Any, BinaryIO, Self, TypeVar

T = TypeVar("T")

# The default chunk size for iterating payloads.
_DEFAULT_CHUNK_SIZE = 64 * 1024


class _AsyncSeekableReader(ABC):
    """Async, seekable, chunked access to a synchronous binary source.

    Iterating the reader yields chunks of ``chunk_size`` bytes until the end of the
    source, or until ``read_length`` bytes (counted from the start) have been
    consumed when a read length is set.
    """

    def __init__(self, *, chunk_size: int, read_length: int | None):
        if chunk_size < 1:
            raise ValueError("The chunk size must be greater than 0.")
        self._chunk_size = chunk_size
        self._read_length = read_length
        self._source = self._open()

    @abstractmethod
    def _open(self) -> BinaryIO:
        """Open the synchronous source the reader wraps."""

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        return func(*args)

    @property
    def read_length(self) -> int | None:
        """The number of bytes, counted from the start of the source, to expose."""
        return self._read_length

    def set_read_length(self, length: int | None) -> None:
        if length is not None and length < 0:
            raise ValueError("The read length must not be negative.")
        self._read_length = length

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything that remains if ``size`` < 0."""
        if self._source.closed:
            raise ValueError("I/O operation on closed file.")

        if self._read_length is not None:
            remaining = max(self._read_length - self._source.tell(), 0)
            size = remaining if size < 0 else min(size, remaining)
            if size == 0:
                return b""

        return await self._run(self._source.read, size)

    async def seek(self, offset: int, whence: int = 0) -> int:
        """Moves the cursor relative to the start (0), cursor (1) or end (2)."""
        return await self._run(self._source.seek, offset, whence)

    def tell(self) -> int:
        return self._source.tell()

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self.iter_chunks()

    def iter_chunks(self, chunk_size: int | None = None) -> AsyncIterator[bytes]:
        return _AsyncChunkIterator(self.read, chunk_size or self._chunk_size)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    @property
    def closed(self) -> bool:
        return self._source.closed

    async def close(self) -> None:
        await self._run(self._source.close)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class AsyncFileReader(_AsyncSeekableReader):
    """An async, seekable, chunked reader over a local file.

    Blocking reads and seeks run in a worker thread so that large uploads don't stall
    the event loop while they are hashed or transmitted. The file is opened
    immediately, so a missing file fails here rather than while signing.
    """

    def __init__(
        self,
        path: str | PathLike[str],
        *,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        read_length: int | None = None,
    ):
        self._path = path
        super().__init__(chunk_size=chunk_size, read_length=read_length)

    def _open(self) -> BinaryIO:
        return open(self._path, "rb")

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(func, *args)

    def __repr__(self) -> str:
        return f"AsyncFileReader(path={self._path!r}, read_length={self._read_length})"


class AsyncBytesReader(_AsyncSeekableReader):
    """The in-memory counterpart of :class:`AsyncFileReader`.

    Useful for payloads assembled by the application that should still be streamed
    to the transport in chunks.
    """

    def __init__(
        self,
        data: bytes | bytearray,
        *,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        read_length: int | None = None,
    ):
        self._data = bytes(data)
        super().__init__(chunk_size=chunk_size, read_length=read_length)

    def _open(self) -> BinaryIO:
        return BytesIO(self._data)

    def __repr__(self) -> str:
        return (
            f"AsyncBytesReader(size={len(self._data)}, "
            f"read_length={self._read_length})"
        )


class _AsyncChunkIterator:
    """Yields chunks from an async read method until it returns nothing."""

    def __init__(self, read: Callable[[int], Awaitable[bytes]], chunk_size: int):
        self._read = read
        self._chunk_size = chunk_size

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> bytes:
        if data := await self._read(self._chunk_size):
            return data
        raise StopAsyncIteration
