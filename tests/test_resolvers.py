"""
Tests for the three resolver backends
"""

import threading
from dataclasses import dataclass

import pytest

from structural_serializer import (
    AccessDenied,
    DynamicMapResolver,
    NotFound,
    RuntimeMetadataResolver,
    SpecializationFailure,
    StaticEnumerationResolver,
    TypeMetadataRegistry,
    allow_all,
    build_phase,
    public_only,
)

from sample_types import Account, Counter, Inner, MyStruct, Outer, Unset


@dataclass
class FreshType:
    alpha: int
    beta: str


class TestDynamicMapResolver:
    """Tests for DynamicMapResolver"""

    def test_fields_follow_insertion_order(self):
        resolver = DynamicMapResolver()
        data = {"b": 1, "a": 2, "c": 3}
        descriptor = resolver.describe(data)
        assert [f.name for f in resolver.fields_of(descriptor)] == ["b", "a", "c"]

    def test_value_lookup(self):
        resolver = DynamicMapResolver()
        data = {"a": 42}
        descriptor = resolver.describe(data)
        assert resolver.value_of(descriptor.field("a"), data) == 42

    def test_object_attribute_map(self):
        class Bag:
            def __init__(self):
                self.x = 1
                self.y = 2

        resolver = DynamicMapResolver()
        bag = Bag()
        descriptor = resolver.describe(bag)
        assert [f.name for f in descriptor.fields] == ["x", "y"]
        assert resolver.value_of(descriptor.field("y"), bag) == 2

    def test_descriptors_are_per_instance(self):
        resolver = DynamicMapResolver()
        first = {"a": 1}
        second = {"b": 2}
        descriptor = resolver.describe(first)

        assert resolver.describe(second) != descriptor
        with pytest.raises(NotFound):
            resolver.value_of(descriptor.field("a"), second)

    def test_nested_mapping(self):
        resolver = DynamicMapResolver()
        data = {"inner": {"y": 2}}
        descriptor = resolver.describe(data)
        plan = resolver.nested(descriptor.field("inner"), data["inner"])
        assert plan is not None
        nested_descriptor, nested_resolver = plan
        assert nested_resolver is resolver
        assert [f.name for f in nested_descriptor.fields] == ["y"]


class TestRuntimeMetadataResolver:
    """Tests for RuntimeMetadataResolver"""

    def test_descriptor_is_shared_and_stable(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        first = resolver.describe(MyStruct(1, "x", 1.0))
        second = resolver.describe(MyStruct)
        assert first is second
        assert [f.name for f in first.fields] == ["a", "b", "c"]

    def test_runtime_order_is_not_promised(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        descriptor = resolver.describe(MyStruct)
        assert all(f.declaration_index is None for f in descriptor.fields)

    def test_private_field_denied_by_default(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        account = Account(1, "hunter2", "alice")
        descriptor = resolver.describe(account)

        with pytest.raises(AccessDenied):
            resolver.value_of(descriptor.field("_secret"), account)
        assert resolver.value_of(descriptor.field("name"), account) == "alice"

    def test_owner_caller_sees_private_field(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        account = Account(1, "hunter2", "alice")
        descriptor = resolver.describe(account)
        field = descriptor.field("_secret")
        assert resolver.value_of(field, account, caller=Account) == "hunter2"

    def test_allow_all_policy(self):
        resolver = RuntimeMetadataResolver(allow_all, registry=TypeMetadataRegistry())
        account = Account(1, "hunter2", "alice")
        descriptor = resolver.describe(account)
        assert resolver.value_of(descriptor.field("_secret"), account) == "hunter2"

    def test_descriptor_instance_mismatch_is_not_found(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        descriptor = resolver.describe(MyStruct)
        with pytest.raises(NotFound):
            resolver.value_of(descriptor.field("a"), Inner(1))

    def test_unset_attribute_is_not_found(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        instance = Unset(1)
        descriptor = resolver.describe(instance)
        with pytest.raises(NotFound):
            resolver.value_of(descriptor.field("cached"), instance)

    def test_static_members_are_marked(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        descriptor = resolver.describe(Counter)
        assert descriptor.field("instances").is_static is True
        assert [f.name for f in descriptor.fields] == ["value"]

    def test_nested_link_from_annotation(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        descriptor = resolver.describe(Outer)
        assert descriptor.field("inner").nested_type is Inner
        assert descriptor.field("x").nested_type is None


class TestAccessPolicies:
    """Tests for the shipped access policies"""

    def test_public_only(self):
        resolver = RuntimeMetadataResolver(registry=TypeMetadataRegistry())
        descriptor = resolver.describe(Account)
        assert public_only(descriptor.field("name")) is True
        assert public_only(descriptor.field("_secret")) is False
        assert public_only(descriptor.field("_secret"), Account) is True
        assert public_only(descriptor.field("_secret"), object()) is False


class TestTypeMetadataRegistry:
    """Tests for concurrent descriptor publication"""

    def test_concurrent_first_use_publishes_one_descriptor(self):
        registry = TypeMetadataRegistry()
        workers = 16
        barrier = threading.Barrier(workers)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            descriptor = registry.get(FreshType)
            with results_lock:
                results.append(descriptor)

        threads = [threading.Thread(target=worker) for _ in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == workers
        assert all(result is results[0] for result in results)
        stats = registry.get_stats()
        assert stats["constructions"] == 1
        assert stats["descriptors_cached"] == 1

    def test_publish_keeps_first_descriptor(self):
        registry = TypeMetadataRegistry()
        first = registry.get(FreshType)
        other = RuntimeMetadataResolver(registry=TypeMetadataRegistry()).describe(
            FreshType
        )
        assert registry.publish(FreshType, other) is first

    def test_clear(self):
        registry = TypeMetadataRegistry()
        registry.get(FreshType)
        assert FreshType in registry
        registry.clear()
        assert FreshType not in registry
        assert registry.get_stats()["constructions"] == 0


class TestStaticEnumerationResolver:
    """Tests for StaticEnumerationResolver"""

    def test_unusable_outside_build_phase(self):
        resolver = StaticEnumerationResolver()
        with pytest.raises(SpecializationFailure):
            resolver.describe(MyStruct)

    def test_source_order_with_indices(self):
        resolver = StaticEnumerationResolver()
        with build_phase():
            descriptor = resolver.describe(MyStruct)
        assert [f.name for f in descriptor.fields] == ["a", "b", "c"]
        assert [f.declaration_index for f in descriptor.fields] == [0, 1, 2]

    def test_describe_is_deterministic(self):
        resolver = StaticEnumerationResolver()
        with build_phase():
            assert resolver.describe(Outer) == resolver.describe(Outer)

    def test_no_access_check(self):
        resolver = StaticEnumerationResolver()
        account = Account(1, "hunter2", "alice")
        with build_phase():
            descriptor = resolver.describe(account)
            assert resolver.value_of(descriptor.field("_secret"), account) == "hunter2"

    def test_plain_class_cannot_be_specialized(self):
        class Opaque:
            pass

        resolver = StaticEnumerationResolver()
        with build_phase():
            with pytest.raises(SpecializationFailure):
                resolver.describe(Opaque)

    def test_value_of_outside_build_phase(self):
        resolver = StaticEnumerationResolver()
        with build_phase():
            descriptor = resolver.describe(Inner)
        with pytest.raises(SpecializationFailure):
            resolver.value_of(descriptor.field("y"), Inner(1))
