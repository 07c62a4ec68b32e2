"""Host test runner bindings that drive the TestListener port.

Implementations:
- unittest (result class, suite class and text runner)
"""
