"""Deduplication state and the token filter chain."""

from __future__ import annotations

import threading
from typing import Optional

from uwx.models import FilterConfig, is_digit, is_letter

GATE_LENGTH = "length"
GATE_SUBSTRING = "substring"
GATE_PATTERN = "pattern"
GATE_ALPHA_NUM = "alpha_num"

GATES = (GATE_LENGTH, GATE_SUBSTRING, GATE_PATTERN, GATE_ALPHA_NUM)


class SeenSet:
    """Token values already attempted against the filter chain."""

    def __init__(self) -> None:
        self._values: set[str] = set()
        self._lock = threading.Lock()

    def add(self, value: str) -> bool:
        """Insert ``value``; return False if it was already present."""
        with self._lock:
            if value in self._values:
                return False
            self._values.add(value)
            return True

    def __contains__(self, value: object) -> bool:
        with self._lock:
            return value in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


def _has_letter_and_digit(value: str) -> bool:
    has_letter = False
    has_digit = False
    for ch in value:
        if is_letter(ch):
            has_letter = True
        elif is_digit(ch):
            has_digit = True
        if has_letter and has_digit:
            return True
    return False


class FilterChain:
    """Length, substring, pattern and alphanumeric gates, ANDed in that order."""

    def __init__(self, config: FilterConfig) -> None:
        self._config = config

    def check(self, value: str) -> Optional[str]:
        """Return the first failing gate name, or None when ``value`` passes."""
        config = self._config
        if len(value) < config.min_length or len(value) > config.max_length:
            return GATE_LENGTH
        if config.substring and config.substring not in value:
            return GATE_SUBSTRING
        if config.pattern is not None and config.pattern.search(value) is None:
            return GATE_PATTERN
        if config.alpha_num_only and not _has_letter_and_digit(value):
            return GATE_ALPHA_NUM
        return None

    def accepts(self, value: str) -> bool:
        return self.check(value) is None
