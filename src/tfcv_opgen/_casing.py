"""Identifier casing for generated names.

Words are split on any non-alphanumeric run and on case changes, the way
common "change case" helpers do it::

    snake_case("fooBar")            # => "foo_bar"
    snake_case("CAPiTaL")           # => "ca_pi_ta_l"
    snake_case("__under__score__")  # => "under_score"
    pascal_case("detect_edges")     # => "DetectEdges"
"""

from __future__ import annotations

import re
from typing import List

# lower|digit followed by upper, and an upper run followed by Upper+lower.
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z])([A-Z][a-z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def split_words(text: str) -> List[str]:
    """Split ``text`` into lower-case words."""
    text = _CAMEL_BOUNDARY.sub(r"\1 \2", text)
    text = _ACRONYM_BOUNDARY.sub(r"\1 \2", text)
    return [word.lower() for word in _SEPARATORS.split(text) if word]


def snake_case(text: str) -> str:
    return "_".join(split_words(text))


def camel_case(text: str) -> str:
    words = split_words(text)
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])


def pascal_case(text: str) -> str:
    return "".join(word.capitalize() for word in split_words(text))
