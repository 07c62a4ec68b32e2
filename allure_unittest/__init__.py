"""Allure unittest adapter.

Translates unittest lifecycle callbacks into ordered report events.
"""

__version__ = "0.1.0"
