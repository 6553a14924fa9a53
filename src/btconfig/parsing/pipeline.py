#!/usr/bin/env python3
"""
BTCONFIG PARSE PIPELINE
-----------------------
Central coordinator of the text side of the loader. Runs the stages in a
strict order, each one consuming the full output of the previous one:

    read -> normalize -> tokenize -> build tree

The result is a ParseContext whose root node is ready for binding.
"""

import logging
from typing import TextIO

from btconfig.parsing.context import ParseContext
from btconfig.parsing.lexer import ConfigLexer
from btconfig.parsing.normalizer import ConfigNormalizer, read_lines
from btconfig.parsing.structurer import ConfigStructurer

logger = logging.getLogger("btconfig.pipeline")


class ParsePipeline:
    """
    The Orchestrator: owns one instance of every text stage.
    Stages keep no state between runs, so a pipeline can be reused.
    """

    def __init__(self):
        self.normalizer = ConfigNormalizer()
        self.lexer = ConfigLexer()
        self.structurer = ConfigStructurer()

    def run(self, reader: TextIO) -> ParseContext:
        context = ParseContext()

        # --- STAGE 0: READ ---
        context.raw_lines = read_lines(reader)

        # --- STAGE 1: NORMALIZE ---
        context.lines = self.normalizer.normalize(context.raw_lines)

        # --- STAGE 2: TOKENIZE ---
        context.token_lines = self.lexer.tokenize_all(context.lines)

        # --- STAGE 3: TREE ---
        context.root = self.structurer.build(context.token_lines)

        logger.debug(
            "parsed %d raw lines into %d nodes",
            len(context.raw_lines), context.count_nodes()
        )
        return context
