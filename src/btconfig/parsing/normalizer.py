#!/usr/bin/env python3
"""
BTCONFIG NORMALIZER - Comment & Whitespace Stripper (Stage 1)
-------------------------------------------------------------
Reads raw text lines and reduces them to their significant characters.
Comments (`// ...` and `/* ... */`) and whitespace outside quoted strings
are removed; quotes are consumed while the characters inside them are kept
verbatim and flagged as literal for the tokenizer.

The string / ranged-comment flags carry across line boundaries. They are
threaded from line to line as an immutable NormalizerState instead of
living on the normalizer instance.
"""

import logging
from typing import Iterable, List, NamedTuple, Optional, TextIO, Tuple

from btconfig.core.errors import ConfigSyntaxError
from btconfig.core.models import (
    ESCAPE,
    LINE_COMMENT,
    QUOTE,
    RANGED_COMMENT_CLOSE,
    RANGED_COMMENT_OPEN,
    Line,
)

logger = logging.getLogger("btconfig.normalizer")


class NormalizerState(NamedTuple):
    """Flags carried from one line to the next."""
    in_string: bool = False
    in_ranged_comment: bool = False


def read_lines(reader: TextIO) -> List[str]:
    """
    Drains an open text stream into trimmed, non-blank lines.
    A leading UTF-8 byte order mark is dropped.
    """
    lines = []
    for index, raw in enumerate(reader):
        if index == 0:
            raw = raw.lstrip('\ufeff')
        stripped = raw.strip()
        if stripped:
            lines.append(stripped)
    return lines


class ConfigNormalizer:
    """
    Strips comments and insignificant whitespace while respecting quoted
    strings and `\\"` escapes. Lines that reduce to nothing are dropped.
    """

    def normalize(self, raw_lines: Iterable[str]) -> List[Line]:
        """Normalizes every line; raises if the input ends inside a string or ranged comment."""
        state = NormalizerState()
        lines: List[Line] = []
        for raw in raw_lines:
            state, line = self.step(state, raw)
            if line is not None:
                lines.append(line)

        if state.in_ranged_comment:
            raise ConfigSyntaxError("unterminated ranged comment: missing closing '*/'")
        if state.in_string:
            raise ConfigSyntaxError("unterminated quoted string: missing closing '\"'")

        logger.debug("normalized %d significant lines", len(lines))
        return lines

    def step(self, state: NormalizerState, raw: str) -> Tuple[NormalizerState, Optional[Line]]:
        """
        Normalizes one raw line under the incoming flags. Returns the flags
        for the next line and the Line, or None when nothing is left.
        """
        in_string = state.in_string
        in_comment = state.in_ranged_comment
        chars: List[str] = []
        quoted = set()

        i = 0
        length = len(raw)
        while i < length:
            char = raw[i]
            pair = raw[i:i + 2]

            if in_comment:
                if pair == RANGED_COMMENT_CLOSE:
                    in_comment = False
                    i += 2
                else:
                    i += 1
                continue

            if not in_string and pair == RANGED_COMMENT_OPEN:
                in_comment = True
                i += 2
                continue

            # \" is a literal quote and never toggles the string state
            if pair == ESCAPE + QUOTE:
                quoted.add(len(chars))
                chars.append(QUOTE)
                i += 2
                continue

            if char == QUOTE:
                in_string = not in_string
                i += 1
                continue

            if in_string:
                quoted.add(len(chars))
                chars.append(char)
                i += 1
                continue

            if char.isspace():
                i += 1
                continue

            if pair == LINE_COMMENT:
                break

            chars.append(char)
            i += 1

        text = "".join(chars)
        line = Line(text, frozenset(quoted)) if text.strip() else None
        return NormalizerState(in_string, in_comment), line
