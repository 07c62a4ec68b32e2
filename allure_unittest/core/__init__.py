"""Core translation logic for the Allure unittest adapter.

This package contains zero external dependencies: the adapter, its
ports, the event models and annotation lookup. Concrete sinks and host
runner bindings are handled by the adapters package.
"""

from .models import (
    ComparisonFailure,
    Description,
    DescriptionType,
    ExpectationFailedError,
    Label,
    LabelType,
    Parameter,
    SeverityLevel,
    TestCaseBrokenEvent,
    TestCaseCanceledEvent,
    TestCaseFailedEvent,
    TestCaseFinishedEvent,
    TestCasePendingEvent,
    TestCaseStartedEvent,
    TestSuiteFinishedEvent,
    TestSuiteRef,
    TestSuiteStartedEvent,
)

__all__ = [
    "ComparisonFailure",
    "Description",
    "DescriptionType",
    "ExpectationFailedError",
    "Label",
    "LabelType",
    "Parameter",
    "SeverityLevel",
    "TestCaseBrokenEvent",
    "TestCaseCanceledEvent",
    "TestCaseFailedEvent",
    "TestCaseFinishedEvent",
    "TestCasePendingEvent",
    "TestCaseStartedEvent",
    "TestSuiteFinishedEvent",
    "TestSuiteRef",
    "TestSuiteStartedEvent",
]
