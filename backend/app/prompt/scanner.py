"""Regex scanning over the prompt's tag vocabulary.

Tags are matched literally (case-sensitive, non-greedy, across newlines). The
format is not real XML: nested elements with the same name and unescaped
angle brackets inside values are not supported.
"""

import re
from functools import lru_cache

_CHILD_ELEMENT = re.compile(r"<([^<>/\s]+)>(.*?)</\1>", re.DOTALL)


@lru_cache(maxsize=64)
def _block_pattern(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    return re.compile(rf"<{name}>(.*?)</{name}>", re.DOTALL)


def first_block(text: str, tag: str) -> str | None:
    match = _block_pattern(tag).search(text)
    return match.group(1) if match else None


def first_value(text: str, tag: str) -> str:
    """Trimmed inner text of the first ``tag`` block, ``""`` when absent."""
    block = first_block(text, tag)
    return block.strip() if block is not None else ""


def all_blocks(text: str, tag: str) -> list[str]:
    return [match.group(1) for match in _block_pattern(tag).finditer(text)]


def all_values(text: str, tag: str) -> list[str]:
    """Trimmed, non-empty inner texts of every ``tag`` block."""
    return [value for value in (block.strip() for block in all_blocks(text, tag)) if value]


def child_elements(text: str) -> list[tuple[str, str]]:
    return [(match.group(1), match.group(2)) for match in _CHILD_ELEMENT.finditer(text)]


def strip_block(text: str, tag: str) -> str:
    return _block_pattern(tag).sub("", text)
