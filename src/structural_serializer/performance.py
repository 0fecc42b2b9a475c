"""
Performance utilities for comparing serialization backends
"""

import time
from typing import Any, Callable, Dict, Iterable


def measure_function_performance(
    func: Callable[[], Any], iterations: int = 1000, samples: int = 5
) -> Dict[str, float]:
    """
    Time ``func`` over several samples of ``iterations`` calls each

    Args:
        func: Zero-argument callable, e.g. one serialization
        iterations: Calls per sample
        samples: Number of timed samples

    Returns:
        Milliseconds per call (mean, min, max) and calls per second
    """
    per_call_ms = []
    for _ in range(samples):
        start = time.perf_counter()
        for _ in range(iterations):
            func()
        per_call_ms.append((time.perf_counter() - start) / iterations * 1000)

    mean_ms = sum(per_call_ms) / len(per_call_ms)
    return {
        "mean_ms": mean_ms,
        "min_ms": min(per_call_ms),
        "max_ms": max(per_call_ms),
        "throughput_per_sec": 1000 / mean_ms,
    }


def compare_backends(
    instance: Any,
    backends: Iterable[str] = ("static", "runtime", "dynamic"),
    iterations: int = 1000,
) -> Dict[str, dict]:
    """
    Measure ``object_to_string`` for one instance under several backends

    Backends that cannot serialize the instance (e.g. "static" for a class
    that was never specialized) are left out of the result.
    """
    from .api import object_to_string
    from .errors import StructuralSerializerError

    results = {}
    for backend in backends:
        try:
            object_to_string(instance, backend=backend)
        except (StructuralSerializerError, TypeError):
            continue
        results[backend] = measure_function_performance(
            lambda b=backend: object_to_string(instance, backend=b), iterations
        )
    return results
