# formstamp/rendering/archive.py

"""
Zip archive written incrementally to a response body.

zipfile runs in streaming mode over a sink without tell()/seek(), so each
entry is emitted as soon as it is appended. drain() hands out the bytes
produced so far and forgets them, which keeps memory at roughly one entry.
"""

import zipfile
from typing import Optional

from formstamp.templates.exceptions import StreamFailureException
from formstamp.utils.logger import get_logger

logger = get_logger(__name__)


class _ChunkSink:
    """Write-only buffer that zipfile treats as an unseekable stream"""

    def __init__(self):
        self._buffer = bytearray()
        self.discard = False

    def write(self, data) -> int:
        if not self.discard:
            self._buffer.extend(data)
        return len(data)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def take(self) -> bytes:
        chunk = bytes(self._buffer)
        self._buffer.clear()
        return chunk


class StreamingArchive:
    """
    Scoped zip writer.

    Use as a context manager: leaving the block normally finalizes the
    archive if finalize() was not called, leaving it with an exception
    aborts it and nothing more is emitted.
    """

    def __init__(self, compression_level: Optional[int] = 9):
        self._sink = _ChunkSink()
        self._zip = zipfile.ZipFile(
            self._sink,
            mode="w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=compression_level,
        )
        self.entries = 0
        self.finalized = False
        self.aborted = False

    def __enter__(self) -> "StreamingArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        elif not self.finalized:
            self.finalize()

    def append(self, name: str, data: bytes) -> None:
        """Add one complete entry."""
        if self.finalized or self.aborted:
            raise StreamFailureException("archive is closed", {"entry": name})
        try:
            self._zip.writestr(name, data)
        except (OSError, ValueError, zipfile.LargeZipFile) as e:
            raise StreamFailureException(f"could not write archive entry: {e}", {"entry": name}) from e
        self.entries += 1

    def drain(self) -> bytes:
        """Bytes written since the last drain."""
        return self._sink.take()

    def finalize(self) -> None:
        """Write the central directory. Call drain() afterwards for the tail."""
        if self.finalized:
            return
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            raise StreamFailureException(f"could not finalize archive: {e}") from e
        self.finalized = True
        logger.debug("Archive finalized", entries=self.entries)

    def abort(self) -> None:
        """Drop the archive without emitting a central directory."""
        if self.finalized or self.aborted:
            return
        self.aborted = True
        self._sink.discard = True
        self._sink.take()
        try:
            self._zip.close()
        except (OSError, ValueError) as e:
            logger.warning("Archive abort did not close cleanly", error_message=str(e))
        logger.info("Archive aborted", entries=self.entries)
