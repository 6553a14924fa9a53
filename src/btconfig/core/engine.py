#!/usr/bin/env python3
"""
BTCONFIG ENGINE - Public Loading API
------------------------------------
Ties the text pipeline to the binder. Parsing always completes (read,
normalize, tokenize, build tree) before any value is written into the
destination.

    load_config(reader, instance)        mutate an existing config object
    load_config_as(reader, ConfigType)   build and return a new one

Both are fail-fast: the first error aborts the load. The in-place form
does not roll back members written before the failure.
"""

import logging
from typing import Any, TextIO, Type, TypeVar

from btconfig.binding.binder import ConfigBinder
from btconfig.core.models import Node
from btconfig.parsing.context import ParseContext
from btconfig.parsing.pipeline import ParsePipeline

logger = logging.getLogger("btconfig.engine")

T = TypeVar("T")


class ConfigLoader:
    """
    Principal orchestrator: one parse pipeline and one binder.
    Holds no per-load state, so concurrent loads on independent streams
    and destinations are safe.
    """

    def __init__(self):
        self.pipeline = ParsePipeline()
        self.binder = ConfigBinder()

    def parse(self, reader: TextIO) -> ParseContext:
        return self.pipeline.run(reader)

    def load_into(self, reader: TextIO, instance: Any) -> None:
        context = self.parse(reader)
        self.binder.bind_into(context.root, instance)
        logger.debug("loaded %d nodes into %s", context.count_nodes(), type(instance).__name__)

    def load_as(self, reader: TextIO, config_type: Type[T]) -> T:
        context = self.parse(reader)
        result = self.binder.bind_new(context.root, config_type)
        logger.debug("loaded %d nodes as new %s", context.count_nodes(), config_type.__name__)
        return result


def load_config(reader: TextIO, instance: Any) -> None:
    """Reads a config from `reader` and loads it onto `instance`."""
    ConfigLoader().load_into(reader, instance)


def load_config_as(reader: TextIO, config_type: Type[T]) -> T:
    """Reads a config from `reader` and returns a new `config_type` holding it."""
    return ConfigLoader().load_as(reader, config_type)


def parse_tree(reader: TextIO) -> Node:
    """Runs the text stages only and returns the root node."""
    return ConfigLoader().parse(reader).root
