"""Server-sent event framing.

Turns a sequence of decoded lines into ``RawEvent`` frames following the
event-stream rules: ``event:`` names the frame, ``data:`` lines are joined with
newlines, a blank line dispatches, ``:`` starts a comment.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from app.schemas.stream_events import RawEvent


def _split_field(line: str) -> tuple[str, str]:
    if ":" not in line:
        return line, ""
    name, value = line.split(":", 1)
    if value.startswith(" "):
        value = value[1:]
    return name, value


class SSEDecoder:
    """Incremental decoder; feed lines, collect frames."""

    def __init__(self) -> None:
        self._event: Optional[str] = None
        self._data: list[str] = []

    def feed(self, line: str) -> Optional[RawEvent]:
        line = line.rstrip("\r\n")
        if not line:
            return self.flush()
        if line.startswith(":"):
            return None

        name, value = _split_field(line)
        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        # id / retry / unknown fields carry nothing the client uses
        return None

    def flush(self) -> Optional[RawEvent]:
        if self._event is None and not self._data:
            return None
        frame = RawEvent(
            event=self._event,
            data="\n".join(self._data) if self._data else None,
        )
        self._event = None
        self._data = []
        return frame


def iter_sse_events(lines: Iterable[str]) -> Iterator[RawEvent]:
    decoder = SSEDecoder()
    for line in lines:
        frame = decoder.feed(line)
        if frame is not None:
            yield frame
    # a body that closes without the trailing blank line still dispatches
    frame = decoder.flush()
    if frame is not None:
        yield frame
