#!/usr/bin/env python3
"""
BTCONFIG STRUCTURER - Tree Builder (Stage 3)
--------------------------------------------
Rebuilds the nested node tree from the flat TokenLine sequence. The depth
marker of each line is the explicit nesting signal: a block opener at depth
N owns every following line at depth N+1 until a line at depth <= N shows up.

A deeper line that no block opener claimed (e.g. a line at depth 3 right
after a leaf at depth 1) is skipped, not rejected.
"""

import logging
from typing import List, Sequence, Tuple

from btconfig.core.errors import ConfigSyntaxError
from btconfig.core.models import Node, TokenLine

logger = logging.getLogger("btconfig.structurer")

ROOT_DEPTH = 1


class ConfigStructurer:
    """
    Depth-driven recursive builder. The root level starts at depth 1 and
    spans the whole token sequence.
    """

    def build(self, token_lines: Sequence[TokenLine]) -> Node:
        """Returns the synthetic root node holding every depth-1 entry."""
        children, _ = self.build_level(token_lines, 0, ROOT_DEPTH)
        root = Node(children=children)
        logger.debug("built tree with %d top-level nodes", len(children))
        return root

    def build_level(self, token_lines: Sequence[TokenLine], start: int,
                    target_depth: int) -> Tuple[List[Node], int]:
        """
        Collects the sibling nodes at `target_depth` starting at `start`.
        Returns the siblings and the index of the first line not consumed.
        """
        siblings: List[Node] = []
        i = start

        while i < len(token_lines):
            line = token_lines[i]
            depth = line.depth

            if depth < target_depth:
                break

            if depth > target_depth:
                logger.warning(
                    "skipping orphaned line at depth %d (expected %d): %s",
                    depth, target_depth, line.describe()
                )
                i += 1
                continue

            node, i = self._build_node(token_lines, i, target_depth)
            siblings.append(node)

        return siblings, i

    def _build_node(self, token_lines: Sequence[TokenLine], index: int,
                    depth: int) -> Tuple[Node, int]:
        line = token_lines[index]
        tokens = line.tokens
        node = Node()

        if len(tokens) == 2:
            # bare value `- val` or anonymous block `- :`
            if line.composite:
                node.children, nxt = self.build_level(token_lines, index + 1, depth + 1)
                return node, nxt
            node.value = tokens[1]

        elif len(tokens) == 3:
            # named block `- key :`
            node.key = tokens[1]
            node.children, nxt = self.build_level(token_lines, index + 1, depth + 1)
            return node, nxt

        elif len(tokens) == 4:
            # key-value pair `- key = val`
            node.key = tokens[1]
            node.value = tokens[3]

        else:
            raise ConfigSyntaxError(
                f"got line with invalid amount of tokens: {len(tokens)} | tokens = {line.describe()}",
                list(tokens),
            )

        return node, index + 1
