"""Codec classes shared by the tests."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, NamedTuple

from automagic.codec import Coding, FieldType, coding_field, register_structure


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    origin: Point
    size: Size


register_structure(Rect)


class Bag:
    """Ordered mutable collection that is not a list."""

    def __init__(self, items=()):
        self._items = list(items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self):
        return iter(self._items)

    def index(self, value):
        return self._items.index(value)

    def append(self, value):
        self._items.append(value)

    def __eq__(self, other):
        return isinstance(other, Bag) and self._items == other._items

    def __repr__(self):
        return f"Bag({self._items!r})"


class FrozenBag(Bag):
    """Ordered collection without append."""

    append = None  # type: ignore[assignment]


class Ledger:
    """Keyed mutable collection that is not a dict."""

    def __init__(self, mapping=None):
        self._data = dict(mapping or {})

    def __len__(self):
        return len(self._data)

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = value

    def keys(self):
        return list(self._data)

    def __eq__(self, other):
        return isinstance(other, Ledger) and self._data == other._data

    def __repr__(self):
        return f"Ledger({self._data!r})"


@dataclass
class Address(Coding):
    street: str = ""
    number: int = 0


@dataclass
class Person(Coding):
    name: str = ""
    address: Address | None = None
    tags: list[str] = field(default_factory=list)


@dataclass
class Shape(Coding):
    coding_enabled = False

    name: str = ""


@dataclass
class Circle(Shape):
    radius: float = 0.0
    center: Point = Point(0, 0)


@dataclass
class Box(Shape):
    frame: Rect = Rect(Point(0, 0), Size(0, 0))


@dataclass
class Drawing(Coding):
    title: str = ""
    shapes: list[Shape] = field(default_factory=list)
    layers: dict[str, list[Shape]] = field(default_factory=dict)
    anchors: tuple[Point, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    history: Bag = field(default_factory=Bag)
    notes: Ledger = field(default_factory=Ledger)
    created: datetime | None = None
    thumbnail: bytes = b""
    extra: Any = None


@dataclass
class Catalog(Coding):
    """Collection classes chosen through field metadata."""

    entries: dict[str, Any] = coding_field(collection_class=Ledger, default_factory=Ledger)
    labels: list[str] = coding_field(
        FieldType.COLLECTION_ARRAY, collection_class=tuple, default=()
    )


@dataclass(eq=False)
class Node(Coding):
    label: str = ""
    children: list["Node"] = field(default_factory=list)
    parent: "Node | None" = None


@dataclass(frozen=True)
class Badge(Coding):
    title: str = ""


@dataclass
class Gadget(Coding):
    coding_name = "com.example.Gadget"

    serial: str = ""


@dataclass
class Account(Coding):
    owner: str = ""
    _cache: dict = field(default_factory=dict)

    def __post_init__(self):
        self.balance = 0

    def keys_for_dictionary_representation(self):
        return super().keys_for_dictionary_representation() + ["balance"]


class Counter(Coding):
    """Codec class that is not a dataclass."""

    label: str
    count: int = 0
    history: list[int]

    def __init__(self, label="", count=0, history=None):
        self.label = label
        self.count = count
        self.history = history if history is not None else []

    def __eq__(self, other):
        return isinstance(other, Counter) and (self.label, self.count, self.history) == (
            other.label,
            other.count,
            other.history,
        )


class Thermometer(Coding):
    """Codec class with a read-only field."""

    unit: str = "C"

    @property
    def reading(self) -> float:
        return 21.5

    def keys_for_dictionary_representation(self):
        return ["unit", "reading"]
