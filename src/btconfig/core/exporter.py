#!/usr/bin/env python3
"""
BTCONFIG EXPORTER - YAML View
-----------------------------
Renders parse trees and bound config objects as YAML for humans. This is
a read-only view used by the CLI; nothing is ever written back in the
config format itself.
"""

import io
from decimal import Decimal
from enum import Enum
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from btconfig.binding.schema import SchemaDescriptor, Shape
from btconfig.core.models import Node


class ConfigExporter:
    """
    The Reconstructor: converts nodes and config objects into ruamel
    containers and dumps them in block style.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        # 2 spaces for mappings, sequences indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.yaml.default_flow_style = False

    def tree_to_data(self, node: Node) -> Any:
        """
        A level whose children all carry distinct keys becomes a mapping;
        any other level becomes a sequence (keyed entries as one-key maps).
        """
        if node.value is not None:
            return node.value

        children = node.children or []
        keys = [child.key for child in children]
        if children and None not in keys and len(set(keys)) == len(keys):
            mapping = CommentedMap()
            for child in children:
                mapping[child.key] = self.tree_to_data(child)
            return mapping

        sequence = CommentedSeq()
        for child in children:
            data = self.tree_to_data(child)
            if child.key is not None:
                entry = CommentedMap()
                entry[child.key] = data
                data = entry
            sequence.append(data)
        return sequence

    def instance_to_data(self, value: Any) -> Any:
        """Plain ruamel containers for a bound config object graph."""
        if isinstance(value, Enum):
            return value.name
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, Decimal):
            return str(value)
        if isinstance(value, dict):
            mapping = CommentedMap()
            for key, item in value.items():
                mapping[self.instance_to_data(key)] = self.instance_to_data(item)
            return mapping
        if isinstance(value, (list, tuple)):
            return CommentedSeq(self.instance_to_data(item) for item in value)

        descriptor = SchemaDescriptor(type(value))
        if descriptor.shape is not Shape.COMPOSITE:
            return str(value)

        mapping = CommentedMap()
        for name in descriptor.iterate_members(value):
            mapping[name] = self.instance_to_data(getattr(value, name, None))
        return mapping

    def export_tree(self, root: Node) -> str:
        return self._dump(self.tree_to_data(root))

    def export_instance(self, instance: Any) -> str:
        return self._dump(self.instance_to_data(instance))

    def _dump(self, data: Any) -> str:
        stream = io.StringIO()
        self.yaml.dump(data, stream)
        return stream.getvalue()
