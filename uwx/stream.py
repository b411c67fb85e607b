"""Producer/consumer token stream between decomposition and routing."""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from uwx.decompose import decompose_line
from uwx.models import Token

logger = logging.getLogger(__name__)

_CLOSED = object()


class StreamClosedError(ValueError):
    """Raised when a token is put after the stream was closed."""


class TokenStream:
    """Unbounded FIFO conduit with a close signal.

    Iterating drains every token put before ``close()`` and then stops.
    Intended for one producer and one consumer.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, token: Token) -> None:
        if self._closed:
            raise StreamClosedError("token stream is closed")
        self._queue.put(token)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[Token]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item


@dataclass
class PipelineResult:
    lines: int
    tokens: int


def _strip_line_ending(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def run_pipeline(lines: Iterable[str], process: Callable[[Token], None]) -> PipelineResult:
    """Decompose ``lines`` on the calling thread and route tokens on a worker.

    Returns only after the consumer has drained the stream, so every produced
    token has been handed to ``process``. An exception raised by ``process``
    is re-raised here once the consumer has stopped.
    """
    stream = TokenStream()
    failure: list[BaseException] = []

    def _consume() -> None:
        try:
            for token in stream:
                process(token)
        except BaseException as exc:  # re-raised on the driving thread
            failure.append(exc)

    consumer = threading.Thread(target=_consume, name="uwx-router", daemon=True)
    consumer.start()

    line_count = 0
    token_count = 0
    try:
        for raw in lines:
            if failure:
                break
            line_count += 1
            for token in decompose_line(_strip_line_ending(raw)):
                stream.put(token)
                token_count += 1
    finally:
        stream.close()
        consumer.join()

    logger.debug("Pipeline drained: %d lines, %d tokens", line_count, token_count)
    error: Optional[BaseException] = failure[0] if failure else None
    if error is not None:
        raise error
    return PipelineResult(lines=line_count, tokens=token_count)
