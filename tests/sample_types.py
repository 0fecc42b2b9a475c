"""
Composite types shared by the test modules

Kept at module level so their annotations resolve.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, NamedTuple, Optional

from structural_serializer import specialize, specialize_all


class Color(Enum):
    RED = 1
    GREEN = 2


@dataclass
class MyStruct:
    a: int
    b: str
    c: float


@dataclass
class Empty:
    pass


@dataclass
class Inner:
    y: int


@dataclass
class Outer:
    x: int
    inner: Inner


@dataclass
class Account:
    id: int
    _secret: str
    name: str


@dataclass
class Counter:
    instances: ClassVar[int] = 0
    value: int = 0

    @property
    def doubled(self) -> int:
        return self.value * 2

    def bump(self) -> None:
        self.value += 1


@dataclass
class Unset:
    a: int
    cached: int = field(init=False)


@dataclass
class PlainNode:
    value: int
    next: Optional["PlainNode"] = None


class Pair(NamedTuple):
    left: int
    right: str


class Slotted:
    __slots__ = ("x", "y")
    x: int

    def __init__(self, x, y):
        self.x = x
        self.y = y


class Legacy:
    KIND = "legacy"

    def __init__(self):
        self.a = 1
        self.b = 2
        self.c = 3


class Bag:
    def __init__(self):
        self.x = 1
        self.y = "two"


@dataclass
class Palette:
    primary: Color
    tags: list


# Specialized at build time


@specialize
@dataclass
class SpecStruct:
    a: int
    b: str
    c: float


@specialize
@dataclass
class SpecEmpty:
    pass


@specialize
@dataclass
class SpecInner:
    y: int


@specialize
@dataclass
class SpecOuter:
    x: int
    inner: SpecInner


@specialize
@dataclass
class SpecHolder:
    x: int
    inner: SpecInner = None


@specialize
@dataclass
class SealedToken:
    id: int
    _token: str


@dataclass
class TokenHolder:
    label: str
    token: SealedToken


@specialize
@dataclass
class LinkedNode:
    value: int
    next: Optional["LinkedNode"] = None


@specialize
@dataclass
class Vault:
    id: int
    _secret: str
    kind: ClassVar[str] = "vault"


@specialize(install_str=True)
@dataclass
class Labeled:
    name: str
    color: Color


@dataclass
class Ping:
    label: str
    pong: Optional["Pong"] = None


@dataclass
class Pong:
    label: str
    ping: Optional[Ping] = None


specialize_all(Ping, Pong)


@dataclass
class BadChild:
    ref: "Nowhere"  # noqa: F821


@dataclass
class HasBadChild:
    child: BadChild


@dataclass
class Cents:
    amount: int


@dataclass
class Invoice:
    number: str
    total: Cents
