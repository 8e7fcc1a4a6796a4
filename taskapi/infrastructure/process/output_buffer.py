"""Bounded text buffer for captured process output."""

import codecs
from collections import deque
from typing import Deque


class OutputBuffer:
    """
    Accumulates decoded output chunks up to a character limit.

    When the limit is exceeded the oldest text is dropped and the number of
    dropped characters is reported at the head of the rendered text.
    """

    def __init__(self, max_chars: int) -> None:
        if max_chars < 1:
            raise ValueError("max_chars must be positive")
        self._max_chars = max_chars
        self._chunks: Deque[str] = deque()
        self._size = 0
        self._dropped = 0

    @property
    def dropped_chars(self) -> int:
        """Number of characters discarded because of the limit."""
        return self._dropped

    def append(self, text: str) -> None:
        """Append decoded text, trimming from the head when over the limit."""
        if not text:
            return

        self._chunks.append(text)
        self._size += len(text)

        while self._size > self._max_chars:
            overflow = self._size - self._max_chars
            head = self._chunks[0]
            if len(head) <= overflow:
                self._chunks.popleft()
                self._size -= len(head)
                self._dropped += len(head)
            else:
                self._chunks[0] = head[overflow:]
                self._size -= overflow
                self._dropped += overflow

    def text(self) -> str:
        """Render the accumulated output."""
        body = "".join(self._chunks)
        if self._dropped:
            return f"[output truncated: {self._dropped} earlier characters dropped]\n{body}"
        return body

    def __len__(self) -> int:
        return self._size


class StreamDecoder:
    """Incremental UTF-8 decoder, one per output stream."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def decode(self, data: bytes) -> str:
        return self._decoder.decode(data)

    def flush(self) -> str:
        return self._decoder.decode(b"", final=True)
