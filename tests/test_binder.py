from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, Flag, IntEnum
from typing import Any, ClassVar, Dict, List, Optional

import pytest

from btconfig.binding.binder import ConfigBinder
from btconfig.binding.converters import convert_scalar
from btconfig.binding.schema import SchemaDescriptor, Shape
from btconfig.core.errors import ConversionError, MalformedNodeError, SchemaError
from btconfig.core.models import Node


class Color(Enum):
    RED = "red"
    GREEN = "green"


class Level(IntEnum):
    LOW = 1
    HIGH = 5


class Perm(Flag):
    READ = 1
    WRITE = 2


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass
class Settings:
    name: str = "default"
    count: int = 0
    ratio: float = 0.0
    enabled: bool = False
    color: Color = Color.RED
    tags: List[str] = field(default_factory=list)
    points: List[Point] = field(default_factory=list)
    limits: Dict[str, int] = field(default_factory=dict)
    origin: Point = field(default_factory=Point)
    matrix: List[List[int]] = field(default_factory=list)
    groups: Dict[str, List[Point]] = field(default_factory=dict)
    by_level: Dict[Level, str] = field(default_factory=dict)
    maybe: Optional[int] = None
    registry: ClassVar[str] = "not a member"


class Plain:
    """Annotated class that is not a dataclass."""
    host: str
    port: int

    def __init__(self):
        self.host = "localhost"
        self.port = 80


class Derived(Plain):
    _secret: str


def leaf(key, value):
    return Node(key=key, value=value)


def block(key, *children):
    return Node(key=key, children=list(children))


def root(*children):
    return Node(children=list(children))


# --- schema -----------------------------------------------------------------

@pytest.mark.parametrize("target, shape", [
    (int, Shape.SCALAR),
    (str, Shape.SCALAR),
    (Color, Shape.SCALAR),
    (Decimal, Shape.SCALAR),
    (Any, Shape.SCALAR),
    (List[int], Shape.SEQUENCE),
    (list, Shape.SEQUENCE),
    (Dict[str, int], Shape.MAPPING),
    (dict, Shape.MAPPING),
    (Point, Shape.COMPOSITE),
    (Optional[Point], Shape.COMPOSITE),
])
def test_classify(target, shape):
    assert SchemaDescriptor(target).classify() is shape


def test_members_skip_classvars_and_follow_mro():
    members = SchemaDescriptor(Settings).iterate_members()
    assert "registry" not in members
    assert members["tags"] == List[str]
    assert list(SchemaDescriptor(Derived).iterate_members()) == ["host", "port", "_secret"]


def test_element_and_key_value_types():
    assert SchemaDescriptor(List[Point]).element_type() is Point
    assert SchemaDescriptor(list).element_type() is str
    assert SchemaDescriptor(Dict[Level, str]).key_value_types() == (Level, str)
    assert SchemaDescriptor(dict).key_value_types() == (str, str)


def test_construct_default_for_scalar_is_schema_error():
    with pytest.raises(SchemaError, match="cannot bind a block into scalar"):
        SchemaDescriptor(int).construct_default()


# --- scalar conversion ------------------------------------------------------

@pytest.mark.parametrize("value, target, expected", [
    ("42", int, 42),
    ("-7", int, -7),
    ("3.5", float, 3.5),
    ("1e3", float, 1000.0),
    ("-Infinity", float, float("-inf")),
    ("TRUE", bool, True),
    ("false", bool, False),
    ("green", Color, Color.GREEN),
    ("high", Level, Level.HIGH),
    ("5", Level, Level.HIGH),
    ("read,write", Perm, Perm.READ | Perm.WRITE),
    ("3", Perm, Perm.READ | Perm.WRITE),
    ("2", Perm, Perm.WRITE),
    ("0.10", Decimal, Decimal("0.10")),
    ("as is", str, "as is"),
    ("raw", Any, "raw"),
])
def test_convert_scalar(value, target, expected):
    assert convert_scalar(value, target) == expected


@pytest.mark.parametrize("value, target", [
    ("4.2", int),
    ("1_000", int),
    ("1,5", float),
    ("yes", bool),
    ("purple", Color),
    ("2", Color),
    ("9", Level),
    ("", int),
])
def test_convert_scalar_rejects(value, target):
    with pytest.raises(ConversionError) as info:
        convert_scalar(value, target, "some.path")
    assert info.value.value == value
    assert info.value.path == "some.path"


# --- binding ----------------------------------------------------------------

def test_bind_new_scalars_and_enum():
    tree = root(leaf("name", "svc"), leaf("count", "3"), leaf("enabled", "True"), leaf("color", "GREEN"))
    result = ConfigBinder().bind_new(tree, Settings)
    assert result.name == "svc"
    assert result.count == 3
    assert result.enabled is True
    assert result.color is Color.GREEN
    assert result.ratio == 0.0


def test_bind_sequences_of_scalars_and_objects():
    tree = root(
        block("tags", Node(value="a"), leaf("", "b")),
        block("points", block(None, leaf("x", "1")), block(None, leaf("y", "2"))),
        block("matrix", block(None, Node(value="1"), Node(value="2")), block(None, Node(value="3"))),
    )
    result = ConfigBinder().bind_new(tree, Settings)
    assert result.tags == ["a", "b"]
    assert result.points == [Point(1, 0), Point(0, 2)]
    assert result.matrix == [[1, 2], [3]]


def test_bind_mappings():
    tree = root(
        block("limits", leaf("cpu", "2"), leaf("mem", "512"), leaf("cpu", "4")),
        block("groups", block("edge", block(None, leaf("x", "9")))),
        block("by_level", leaf("low", "quiet"), leaf("HIGH", "loud")),
    )
    result = ConfigBinder().bind_new(tree, Settings)
    assert result.limits == {"cpu": 4, "mem": 512}
    assert result.groups == {"edge": [Point(9, 0)]}
    assert result.by_level == {Level.LOW: "quiet", Level.HIGH: "loud"}


def test_bind_into_keeps_untouched_members():
    settings = Settings(name="keep", count=7)
    ConfigBinder().bind_into(root(leaf("count", "8")), settings)
    assert settings.name == "keep"
    assert settings.count == 8


def test_bind_into_replaces_nested_objects():
    settings = Settings(origin=Point(5, 5))
    ConfigBinder().bind_into(root(block("origin", leaf("x", "1"))), settings)
    assert settings.origin == Point(1, 0)


def test_bind_plain_annotated_class():
    result = ConfigBinder().bind_new(root(leaf("port", "8080"), leaf("_secret", "s")), Derived)
    assert result.host == "localhost"
    assert result.port == 8080
    assert result._secret == "s"


class Unannotated:
    def __init__(self):
        self.host = "localhost"
        self.port = 80
        self.tags = []
        self.origin = Point()
        self.extra = None


def test_bind_unannotated_class_types_members_by_current_value():
    tree = root(
        leaf("port", "8080"),
        block("tags", Node(value="a"), Node(value="b")),
        block("origin", leaf("y", "3")),
        leaf("extra", "anything"),
    )
    result = ConfigBinder().bind_new(tree, Unannotated)
    assert result.host == "localhost"
    assert result.port == 8080
    assert result.tags == ["a", "b"]
    assert result.origin == Point(0, 3)
    assert result.extra == "anything"


def test_unannotated_class_rejects_unknown_and_badly_typed_keys():
    with pytest.raises(SchemaError, match="ghost"):
        ConfigBinder().bind_new(root(leaf("ghost", "1")), Unannotated)
    with pytest.raises(ConversionError):
        ConfigBinder().bind_new(root(leaf("port", "eighty")), Unannotated)


def test_iterate_members_without_instance_ignores_plain_attributes():
    assert SchemaDescriptor(Unannotated).iterate_members() == {}
    members = SchemaDescriptor(Plain).iterate_members(Plain())
    assert members == {"host": str, "port": int}


def test_optional_member_binds_inner_type():
    assert ConfigBinder().bind_new(root(leaf("maybe", "12")), Settings).maybe == 12


def test_unknown_key_is_schema_error_at_any_depth():
    with pytest.raises(SchemaError, match="ghost") as info:
        ConfigBinder().bind_new(root(block("origin", leaf("ghost", "1"))), Settings)
    assert info.value.key == "ghost"
    assert info.value.path == "origin"


def test_keys_are_case_sensitive():
    with pytest.raises(SchemaError):
        ConfigBinder().bind_new(root(leaf("Name", "x")), Settings)


def test_anonymous_entry_in_object_is_schema_error():
    with pytest.raises(SchemaError):
        ConfigBinder().bind_new(root(Node(value="stray")), Settings)


def test_mapping_entry_without_key_is_schema_error():
    with pytest.raises(SchemaError, match="missing its key"):
        ConfigBinder().bind_new(root(block("limits", Node(value="1"))), Settings)


def test_node_without_value_or_children_is_malformed():
    with pytest.raises(MalformedNodeError):
        ConfigBinder().bind_new(root(Node(key="name")), Settings)


def test_block_into_scalar_member_is_schema_error():
    with pytest.raises(SchemaError):
        ConfigBinder().bind_new(root(block("count", leaf("a", "1"))), Settings)


def test_leaf_into_list_member_is_conversion_error():
    with pytest.raises(ConversionError):
        ConfigBinder().bind_new(root(leaf("tags", "a")), Settings)


def test_conversion_error_carries_path():
    tree = root(block("points", block(None, leaf("x", "nope"))))
    with pytest.raises(ConversionError) as info:
        ConfigBinder().bind_new(tree, Settings)
    assert info.value.path == "points[0].x"


def test_root_must_be_composite():
    with pytest.raises(SchemaError, match="composite"):
        ConfigBinder().bind_new(root(), List[int])
