"""Incremental XML generation that can be read like a file, piece by piece."""

from __future__ import annotations

import abc
from collections import deque


class XmlGenerator(abc.ABC):
    """Produces an XML document lazily and serves it through offset reads.

    Subclasses implement :meth:`generate_more`, which appends the next pieces
    of output with :meth:`_add_to_output`. Output that has been read entirely
    is discarded, so reads may only move forward past :attr:`file_offset`.
    """

    def __init__(self) -> None:
        self._pending: deque[bytes] = deque()
        self._file_offset = 0

    @property
    def file_offset(self) -> int:
        """Offset in the document of the first byte still held in memory."""
        return self._file_offset

    def read(self, offset: int, length: int) -> bytes:
        """Return up to ``length`` bytes of the document starting at ``offset``.

        A short result (including an empty one) means the end of the document
        was reached. Raises ``ValueError`` when ``offset`` lies before
        :attr:`file_offset`, since that data is no longer available.
        """
        if offset < self._file_offset:
            raise ValueError(
                f"offset {offset} lies before the retained data at {self._file_offset}"
            )
        offset -= self._file_offset
        output = bytearray()
        while length > 0:
            if not self._pending:
                self.generate_more()
                if not self._pending:
                    break
            front = self._pending[0]
            skip = min(offset, len(front))
            offset -= skip
            take = min(length, len(front) - skip)
            output += front[skip : skip + take]
            length -= take
            if skip + take == len(front):
                self._pending.popleft()
                self._file_offset += len(front)
        return bytes(output)

    @abc.abstractmethod
    def generate_more(self) -> None:
        """Append more output; append nothing only once the document is complete."""

    def _add_to_output(self, piece: str | int) -> None:
        """Queue a literal string or an integer rendered in decimal."""
        text = str(piece) if isinstance(piece, int) else piece
        self._pending.append(text.encode("utf-8"))

    def _internal_reset(self) -> None:
        """Drop queued output and start the document again at offset zero."""
        self._file_offset = 0
        self._pending.clear()