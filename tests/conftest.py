"""
Shared pytest fixtures and configuration for obstable tests.
"""

import pytest

from obstable import _reset_default_arena


@pytest.fixture(autouse=True)
def arena():
    """Reset the default arena before each test to prevent state leakage."""
    return _reset_default_arena()


class FireLog:
    """Records which watched containers fired, in order."""

    def __init__(self):
        self.events = []

    def watch(self, container, label):
        container.subscribe(lambda: self.events.append(label))
        return container

    def clear(self):
        self.events.clear()

    def __len__(self):
        return len(self.events)


@pytest.fixture
def fire_log():
    """Provide a FireLog for tests that assert on notification order."""
    return FireLog()
