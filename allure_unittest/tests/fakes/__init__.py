"""Fake implementations of core ports for testing.

- FakeEventSink: Captures fired events for assertion
"""

from .sink import FakeEventSink

__all__ = ["FakeEventSink"]
