"""Test suite for the Allure unittest adapter.

Organized into three categories:

1. core/: Unit tests for the adapter, models and annotation lookup
   - No filesystem beyond pytest's tmp_path
   - Uses the in-memory fake sink

2. adapters/: Integration tests for the JSON sink and unittest binding
   - Runs real unittest suites against the adapter

3. fakes/: Port implementations for testing
   - In-memory EventSinkPort
"""
