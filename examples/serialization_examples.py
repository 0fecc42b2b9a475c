#!/usr/bin/env python3
"""
Structural Serialization Examples

Demonstrates the three serialization backends:
- Attribute maps (dicts and plain objects)
- Shared runtime metadata for annotated classes
- Routines generated once per class with @specialize
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import ClassVar, List, Optional
from uuid import UUID, uuid4

from structural_serializer import (
    RecursionLimitExceeded,
    SerializerConfig,
    get_registry_stats,
    get_specialized_source,
    object_to_string,
    register_stringifier,
    register_type,
    specialize,
)


class Priority(Enum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3


@dataclass
class User:
    id: int
    name: str
    email: str
    _password_hash: str = ""


@specialize
@dataclass
class Address:
    street: str
    city: str


@specialize(install_str=True)
@dataclass
class Customer:
    name: str
    address: Address
    billing: Optional[Address] = None


@dataclass
class Order:
    id: UUID
    user: User
    amount: Decimal
    items: List[str]
    priority: Priority
    created_at: datetime
    currency: ClassVar[str] = "EUR"


class LegacyRecord:
    def __init__(self, code, label):
        self.code = code
        self.label = label


class Money:
    def __init__(self, cents):
        self.cents = cents


@dataclass
class Node:
    value: int
    next: Optional["Node"] = None


def example_attribute_maps():
    """Example: dicts and plain objects go through the attribute map backend"""
    print("🗂️ Attribute Map Example")
    print("=" * 50)

    print(object_to_string({"service": "billing", "retries": 3, "enabled": True}))
    print(object_to_string(LegacyRecord("A-17", "archived"), backend="dynamic"))
    print(object_to_string({"outer": {"inner": {"level": 3}}}))
    print()


def example_runtime_metadata():
    """Example: annotated classes read through shared runtime metadata"""
    print("🏗️ Runtime Metadata Example")
    print("=" * 50)

    user = User(12345, "John Doe", "john.doe@example.com", "5f4dcc3b")
    order = Order(
        id=uuid4(),
        user=user,
        amount=Decimal("149.99"),
        items=["Laptop", "Mouse", "Keyboard"],
        priority=Priority.HIGH,
        created_at=datetime(2024, 1, 15, 10, 30, 0),
    )

    # Private members and ClassVars are left out
    print(object_to_string(order))
    print(object_to_string(user, config=SerializerConfig(runtime_access="all")))
    print(f"Registry: {get_registry_stats()}")
    print()


def example_specialized_routines():
    """Example: routines generated at class definition time"""
    print("⚡ Specialized Routine Example")
    print("=" * 50)

    customer = Customer("Acme", Address("Main St 1", "Springfield"))
    print(object_to_string(customer, backend="static"))
    print(str(customer))
    print()
    print("Generated routine:")
    print(get_specialized_source(Address))


def example_custom_types():
    """Example: explicit declarations and custom scalar formatting"""
    print("🧩 Custom Type Example")
    print("=" * 50)

    register_type(LegacyRecord, ["code", "label"])
    register_stringifier(Money, lambda m, config: f"{m.cents / 100:.2f} EUR")

    print(object_to_string(LegacyRecord("B-2", "active"), backend="runtime"))
    print(object_to_string({"total": Money(1999)}))
    print()


def example_error_handling():
    """Example: cycles and deep nesting are reported, never looped on"""
    print("🛡️ Error Handling Example")
    print("=" * 50)

    head = Node(1)
    head.next = Node(2, head)
    try:
        object_to_string(head)
    except RecursionLimitExceeded as e:
        print(f"Caught: {e}")

    chain = Node(0)
    for i in range(1, 10):
        chain = Node(i, chain)
    try:
        object_to_string(chain, config=SerializerConfig(max_depth=5))
    except RecursionLimitExceeded as e:
        print(f"Caught: {e}")
    print()


def main():
    """Run all serialization examples"""
    print("🚀 Structural Serialization Examples")
    print("=" * 60)
    print()

    example_attribute_maps()
    example_runtime_metadata()
    example_specialized_routines()
    example_custom_types()
    example_error_handling()

    print("🎉 All serialization examples completed!")


if __name__ == "__main__":
    main()
