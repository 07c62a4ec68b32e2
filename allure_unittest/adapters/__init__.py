"""External adapters for the Allure unittest adapter.

This package holds everything that touches the filesystem or a host
test runner, and provides implementations of the core port interfaces.

Adapter Organization:

- sink/: Event sinks that persist report events (JSON files)
- runner/: Host runner bindings that drive TestListener (unittest)
"""
