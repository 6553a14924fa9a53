#!/usr/bin/env python3
"""
BTCONFIG LEXER - Line Tokenizer (Stage 2)
-----------------------------------------
Decomposes normalized lines into TokenLines: a depth marker run followed
by a bare value, a block opener, or a key-value assignment.

    -value          -> ['-', 'value']
    --:             -> ['--', ':']
    -key:           -> ['-', 'key', ':']
    ---key=value    -> ['---', 'key', '=', 'value']

Characters that came from a quoted string are literal and never act as
depth, assignment or composite markers.
"""

import logging
from typing import Iterable, List

from btconfig.core.errors import ConfigSyntaxError
from btconfig.core.models import (
    ASSIGNMENT_MARKER,
    COMPOSITE_MARKER,
    DEPTH_MARKER,
    Line,
    TokenLine,
)

logger = logging.getLogger("btconfig.lexer")

VALID_TOKEN_COUNTS = (2, 3, 4)


class ConfigLexer:
    """
    Turns every normalized Line into a TokenLine and checks its shape.
    """

    def tokenize_all(self, lines: Iterable[Line]) -> List[TokenLine]:
        token_lines = [self.tokenize(line) for line in lines]
        logger.debug("tokenized %d lines", len(token_lines))
        return token_lines

    def tokenize(self, line: Line) -> TokenLine:
        """
        Splits a single line. Raises ConfigSyntaxError when the line has no
        depth marker or ends up with a token count other than 2, 3 or 4.
        """
        text = line.text
        length = len(text)

        i = self._depth_of(line)
        if i == 0:
            raise ConfigSyntaxError(f"line {text!r} does not start with a depth marker '{DEPTH_MARKER}'")

        tokens = [text[:i]]
        if i == length:
            raise ConfigSyntaxError(f"line {text!r} holds nothing but depth markers", tokens)

        buffer: List[str] = []
        composite = False

        while i < length:
            char = text[i]
            literal = line.is_literal(i)

            if not literal and char == COMPOSITE_MARKER and i == length - 1:
                # empty buffer here means an anonymous block `--:`
                if buffer:
                    tokens.append("".join(buffer))
                tokens.append(COMPOSITE_MARKER)
                composite = len(tokens) in (2, 3)
                break

            if not literal and char == ASSIGNMENT_MARKER:
                tokens.append("".join(buffer))
                buffer = []
                tokens.append(ASSIGNMENT_MARKER)
                i += 1

                # `---key=` assigns an empty string
                if i == length:
                    tokens.append("")
                continue

            buffer.append(char)
            i += 1

            if i == length:
                tokens.append("".join(buffer))

        if len(tokens) not in VALID_TOKEN_COUNTS:
            raise ConfigSyntaxError(
                f"got line with invalid amount of tokens: {len(tokens)} | tokens = "
                + ", ".join(repr(t) for t in tokens),
                tokens,
            )

        return TokenLine(tokens=tokens, composite=composite)

    def _depth_of(self, line: Line) -> int:
        """Length of the leading run of unquoted depth markers."""
        depth = 0
        for i, char in enumerate(line.text):
            if char != DEPTH_MARKER or line.is_literal(i):
                break
            depth += 1
        return depth
