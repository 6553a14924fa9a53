#!/usr/bin/env python3
"""
BTCONFIG PARSE CONTEXT
----------------------
The record of a single parse run. Holds every intermediate result so that
callers (and the CLI) can inspect what each stage produced.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from btconfig.core.models import Line, Node, TokenLine


@dataclass
class ParseContext:
    """
    Filled in stage by stage by the ParsePipeline; discarded once bound.
    """
    raw_lines: List[str] = field(default_factory=list)      # trimmed, non-blank input lines
    lines: List[Line] = field(default_factory=list)         # after comment/whitespace removal
    token_lines: List[TokenLine] = field(default_factory=list)
    root: Optional[Node] = None                             # synthetic root of the node tree

    def count_nodes(self) -> int:
        """Number of nodes below the root."""
        if self.root is None:
            return 0
        stack = list(self.root.children or [])
        count = 0
        while stack:
            node = stack.pop()
            count += 1
            if node.children:
                stack.extend(node.children)
        return count
