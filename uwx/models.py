"""Data models and character classes for UWX."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OriginTag(str, Enum):
    """URL region a token was extracted from."""

    SUBDOMAIN = "subdomain"
    PATH = "path"
    PARAM_NAME = "param_name"
    PARAM_VALUE = "param_value"
    FRAGMENT = "fragment"
    GENERIC = "generic"


@dataclass(frozen=True)
class Token:
    value: str
    origin: OriginTag


@dataclass(frozen=True)
class FilterConfig:
    min_length: int = 1
    max_length: int = 25
    alpha_num_only: bool = False
    substring: str = ""
    pattern: Optional[re.Pattern[str]] = None


def is_letter(ch: str) -> bool:
    return unicodedata.category(ch).startswith("L")


def is_digit(ch: str) -> bool:
    """Any Unicode number (Nd, Nl, No), not only ASCII 0-9."""
    return unicodedata.category(ch).startswith("N")


def is_word_char(ch: str) -> bool:
    return is_letter(ch) or is_digit(ch)
