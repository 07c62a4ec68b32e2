"""Event sink adapters that persist report events.

Implementations:
- JSON files (one artifact per event, in emission order)
"""
