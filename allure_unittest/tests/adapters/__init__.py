"""Integration tests for adapter implementations.

These tests exercise the JSON sink against a real directory and the
unittest binding against real unittest suites.
"""
