#!/usr/bin/env python3
"""
BTCONFIG BINDER - Type-Directed Tree Walker (Stage 4)
-----------------------------------------------------
Walks the node tree against a destination type and writes the values into
a typed instance graph. Each node is dispatched on the shape of the type it
is bound to:

    scalar     -> leaf string converted (primitive or enum)
    sequence   -> one element per child, in source order
    mapping    -> one entry per child, keyed by the converted child key
    composite  -> child keys matched against the declared member names

The root node is always bound as a composite.
"""

import logging
from typing import Any, Optional, Type, TypeVar

from btconfig.binding.converters import convert_scalar
from btconfig.binding.schema import SchemaDescriptor, Shape
from btconfig.core.errors import MalformedNodeError, SchemaError
from btconfig.core.models import Node

logger = logging.getLogger("btconfig.binder")

T = TypeVar("T")


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


class ConfigBinder:
    """
    Stateless binder; one instance can serve any number of loads.
    """

    def bind_into(self, root: Node, instance: Any) -> None:
        """Binds the tree onto an existing instance, member by member."""
        descriptor = SchemaDescriptor(type(instance))
        self._require_composite(descriptor)
        logger.debug("binding into existing %s", descriptor.name)
        self._bind_composite(root, descriptor, instance, "")

    def bind_new(self, root: Node, config_type: Type[T]) -> T:
        """Constructs a default instance of `config_type` and binds the tree onto it."""
        descriptor = SchemaDescriptor(config_type)
        self._require_composite(descriptor)
        instance = descriptor.construct_default()
        logger.debug("binding into new %s", descriptor.name)
        self._bind_composite(root, descriptor, instance, "")
        return instance

    def _require_composite(self, descriptor: SchemaDescriptor):
        if descriptor.shape is not Shape.COMPOSITE:
            raise SchemaError(
                f"the top level of a config binds into a composite type, got {descriptor.shape.value} {descriptor.name}"
            )

    def bind_value(self, node: Node, target: Any, path: str = "") -> Any:
        """
        Produces the value of one node for a slot declared as `target`:
        a converted scalar for a leaf, a freshly built container or object
        for a block.
        """
        if node.value is not None:
            return convert_scalar(node.value, SchemaDescriptor(target).target, path)

        if node.children is not None:
            descriptor = SchemaDescriptor(target)
            result = descriptor.construct_default()

            if descriptor.shape is Shape.SEQUENCE:
                self._bind_sequence(node, descriptor, result, path)
            elif descriptor.shape is Shape.MAPPING:
                self._bind_mapping(node, descriptor, result, path)
            else:
                self._bind_composite(node, descriptor, result, path)
            return result

        raise MalformedNodeError(
            f"got node without any values! key = {node.describe()}", key=node.key, path=path
        )

    def _bind_sequence(self, node: Node, descriptor: SchemaDescriptor, result: list, path: str):
        if node.children is None:
            raise MalformedNodeError("called sequence binding with no children", key=node.key, path=path)

        element_type = descriptor.element_type()
        for index, child in enumerate(node.children):
            result.append(self.bind_value(child, element_type, f"{path}[{index}]"))

    def _bind_mapping(self, node: Node, descriptor: SchemaDescriptor, result: dict, path: str):
        if node.children is None:
            raise MalformedNodeError("called mapping binding with no children", key=node.key, path=path)

        key_type, value_type = descriptor.key_value_types()
        for index, child in enumerate(node.children):
            if child.key is None:
                raise SchemaError(
                    f"mapping entry #{index} is missing its key", path=path
                )
            entry_path = _join(path, child.key)
            parsed_key = convert_scalar(child.key, SchemaDescriptor(key_type).target, entry_path)
            # later entries overwrite earlier ones with the same key
            result[parsed_key] = self.bind_value(child, value_type, entry_path)

    def _bind_composite(self, node: Node, descriptor: SchemaDescriptor, instance: Any, path: str):
        if node.children is None:
            raise MalformedNodeError("called object binding with no children", key=node.key, path=path)

        members = descriptor.iterate_members(instance)
        for child in node.children:
            key: Optional[str] = child.key
            if key is None or key not in members:
                raise SchemaError(
                    f"config file has key: {key} | which is unknown to {descriptor.name}. Remove this key.",
                    key=key, path=path or None
                )

            member_path = _join(path, key)
            value = self.bind_value(child, members[key], member_path)
            try:
                setattr(instance, key, value)
            except AttributeError as e:
                raise SchemaError(
                    f"member {key} of {descriptor.name} cannot be written: {e}", key=key, path=member_path
                )
