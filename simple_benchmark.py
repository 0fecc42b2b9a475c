#!/usr/bin/env python3
"""
Simple performance analysis for structural serialization
"""

from dataclasses import dataclass
from typing import Optional

from structural_serializer import object_to_string, specialize
from structural_serializer.performance import (
    compare_backends,
    measure_function_performance,
)


@specialize
@dataclass
class Point:
    x: int
    y: int


@specialize
@dataclass
class Segment:
    start: Point
    end: Point
    label: Optional[str] = None


@dataclass
class Record:
    id: int
    name: str
    score: float
    active: bool


def run_performance_analysis():
    print("🔍 Structural Serializer Performance Analysis")
    print("=" * 50)

    # Test 1: Backend comparison on a flat specialized type
    print("\n1. Backend Comparison (Point, per call)")
    point_stats = compare_backends(Point(1, 2))
    for backend, stats in point_stats.items():
        print(f"   {backend:<8}: {stats['mean_ms']:.4f}ms")

    # Test 2: Nested specialized type
    print("\n2. Backend Comparison (Segment, per call)")
    segment = Segment(Point(0, 0), Point(3, 4), "diagonal")
    segment_stats = compare_backends(segment)
    for backend, stats in segment_stats.items():
        print(f"   {backend:<8}: {stats['mean_ms']:.4f}ms")

    # Test 3: Plain dataclass, runtime metadata only
    print("\n3. Runtime Metadata (Record, per call)")
    record = Record(7, "widget", 0.75, True)
    record_stats = measure_function_performance(lambda: object_to_string(record))
    print(f"   runtime : {record_stats['mean_ms']:.4f}ms")

    # Test 4: Attribute map
    print("\n4. Attribute Map (dict, per call)")
    mapping = {"id": 7, "name": "widget", "score": 0.75, "active": True}
    mapping_stats = measure_function_performance(lambda: object_to_string(mapping))
    print(f"   dynamic : {mapping_stats['mean_ms']:.4f}ms")

    print("\n" + "=" * 50)
    print("✅ Performance analysis complete!")

    if "static" in segment_stats and "runtime" in segment_stats:
        speedup = segment_stats["runtime"]["mean_ms"] / segment_stats["static"]["mean_ms"]
        print(f"\n🚀 Specialized speedup on nested values: {speedup:.1f}x")

    print("\n📊 Throughput:")
    for backend, stats in point_stats.items():
        print(f"{backend}: {stats['throughput_per_sec']:.0f} values/second")


if __name__ == "__main__":
    run_performance_analysis()
