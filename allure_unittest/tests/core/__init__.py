"""Unit tests for core translation logic.

These tests exercise the adapter without external dependencies.
The event sink is replaced with the in-memory fake from tests/fakes/.
"""
