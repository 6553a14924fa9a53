#!/usr/bin/env python3
"""
BTCONFIG CORE MODELS
--------------------
Defines the fundamental data structures shared by every stage of the
config pipeline: normalized lines, token lines and the node tree.
These models represent the lowest level of config abstraction.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

# Grammar characters of the config format
DEPTH_MARKER = "-"
ASSIGNMENT_MARKER = "="
COMPOSITE_MARKER = ":"
QUOTE = '"'
ESCAPE = "\\"
LINE_COMMENT = "//"
RANGED_COMMENT_OPEN = "/*"
RANGED_COMMENT_CLOSE = "*/"


@dataclass(frozen=True)
class Line:
    """
    A single significant line after comment and whitespace removal.

    `quoted` holds the positions of characters that came from inside a
    quoted string (or from an escaped quote). Those characters are literal
    text and never act as grammar markers.
    """
    text: str
    quoted: FrozenSet[int] = frozenset()

    def is_literal(self, index: int) -> bool:
        return index in self.quoted

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass
class TokenLine:
    """
    The token sequence of one Line.

    tokens[0] is the depth marker run, followed by one of the shapes:
      [depth, value] / [depth, ":"]      bare value / anonymous block
      [depth, key, ":"]                  named block
      [depth, key, "=", value]           key-value leaf
    """
    tokens: List[str]
    composite: bool = False   # True when the last token opens a nested block

    @property
    def depth(self) -> int:
        return len(self.tokens[0])

    def __len__(self) -> int:
        return len(self.tokens)

    def describe(self) -> str:
        return ", ".join(repr(t) for t in self.tokens)


@dataclass
class Node:
    """
    A node of the parsed config tree.

    A leaf carries `value`, a composite carries `children`; the synthetic
    root only has children. `key` is None for anonymous entries (list items).
    """
    key: Optional[str] = None
    value: Optional[str] = None
    children: Optional[List["Node"]] = None

    @property
    def is_leaf(self) -> bool:
        return self.value is not None

    @property
    def is_composite(self) -> bool:
        return self.children is not None

    def describe(self) -> str:
        return self.key if self.key is not None else "<anonymous>"


@dataclass
class ParseReport:
    """Outcome of checking a single file from the command line."""
    file_path: str
    success: bool
    status: str
    node_count: int = 0
    error: Optional[str] = None
