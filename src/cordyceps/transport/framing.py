"""transport.framing

Two ways of turning the raw response body into JSON frames.

1. :func:`strip_prefix` - the fast path used by ``Client.send``. It assumes
   every physical chunk is exactly one ``data: {...}`` event and drops the
   first :data:`FRAME_PREFIX_LEN` bytes without looking at them. If the
   transport splits or batches events the result is garbage, which the
   caller's frame decoding then skips.
2. :class:`EventStreamDecoder` - buffers bytes and re-segments them on the
   event-stream line structure, so chunk boundaries no longer matter. Used by
   ``Client.send_events``.
"""

from __future__ import annotations

import re

FRAME_PREFIX = b'data: '
FRAME_PREFIX_LEN = len(FRAME_PREFIX)

#: Payload of the final event; not JSON.
DONE_SENTINEL = b'[DONE]'

_LINE_END = re.compile(rb'\r\n|\r|\n')


def strip_prefix(chunk: bytes) -> bytes:
    """Drop the fixed-width framing marker from *chunk*. The marker is not validated."""
    return chunk[FRAME_PREFIX_LEN:]


class EventStreamDecoder:
    """Incremental ``text/event-stream`` reframer.

    Feed it raw body bytes in whatever pieces the transport delivers; it
    returns the ``data`` payload of every event completed so far.

    * lines end in LF, CRLF or CR (a CR at the very end of the buffer is held
      back until the next feed, it may be the first half of a CRLF)
    * ``data:`` lines accumulate, joined with ``\\n``; one leading space after
      the colon is removed
    * a blank line dispatches the accumulated event
    * comments (``:keep-alive``) and other fields (``event``, ``id``,
      ``retry``) are ignored
    """

    def __init__(self) -> None:
        self._buffer = b''
        self._data_lines: list[bytes] = []

    def feed(self, data: bytes) -> list[bytes]:
        self._buffer += data
        return self._process(final=False)

    def flush(self) -> list[bytes]:
        """Dispatch whatever is left once the body has ended."""
        events = self._process(final=True)
        if self._buffer:
            self._handle_line(self._buffer)
            self._buffer = b''
        if (event := self._dispatch()) is not None:
            events.append(event)
        return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process(self, *, final: bool) -> list[bytes]:
        events: list[bytes] = []
        while (m := _LINE_END.search(self._buffer)) is not None:
            if not final and m.group() == b'\r' and m.end() == len(self._buffer):
                break
            line = self._buffer[: m.start()]
            self._buffer = self._buffer[m.end() :]
            if not line:
                if (event := self._dispatch()) is not None:
                    events.append(event)
                continue
            self._handle_line(line)
        return events

    def _handle_line(self, line: bytes) -> None:
        if line.startswith(b':'):
            return
        field, sep, value = line.partition(b':')
        if sep and value.startswith(b' '):
            value = value[1:]
        if field == b'data':
            self._data_lines.append(value)

    def _dispatch(self) -> bytes | None:
        if not self._data_lines:
            return None
        event = b'\n'.join(self._data_lines)
        self._data_lines = []
        return event
