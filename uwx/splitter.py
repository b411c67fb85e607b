"""Split text into maximal letter/digit runs."""

from __future__ import annotations

from typing import Iterator

from uwx.models import OriginTag, Token, is_word_char


def split_runs(text: str, origin: OriginTag) -> Iterator[Token]:
    """Yield each maximal alphanumeric run of ``text`` tagged with ``origin``."""
    buffer: list[str] = []
    for ch in text:
        if is_word_char(ch):
            buffer.append(ch)
            continue
        if buffer:
            yield Token(value="".join(buffer), origin=origin)
            buffer = []
    if buffer:
        yield Token(value="".join(buffer), origin=origin)
