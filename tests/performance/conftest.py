"""
Configuration for performance tests
"""

import pytest


def pytest_configure(config):
    """Configure pytest for performance tests"""
    config.addinivalue_line(
        "markers", "performance: mark test as performance benchmark"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to handle performance tests"""
    for item in items:
        # Add performance marker to all tests in performance/ directory
        if "performance" in str(item.fspath):
            item.add_marker(pytest.mark.performance)


@pytest.fixture(scope="session")
def performance_config():
    """Configuration for performance tests"""
    return {
        "min_throughput_specialized": 20000,  # calls/sec for generated routines
        "min_throughput_runtime": 2000,  # calls/sec for runtime metadata traversal
        "min_speedup_specialized": 1.5,  # specialized vs runtime traversal
    }
