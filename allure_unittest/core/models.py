"""Domain models for the Allure unittest adapter.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

import difflib
import pprint
import traceback
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class LabelType(Enum):
    """Well-known label names understood by the report model."""

    FEATURE = "feature"
    STORY = "story"
    SEVERITY = "severity"
    ISSUE = "issue"
    TEST_ID = "testId"


class SeverityLevel(Enum):
    """Severity levels a test case can be tagged with."""

    BLOCKER = "blocker"
    CRITICAL = "critical"
    NORMAL = "normal"
    MINOR = "minor"
    TRIVIAL = "trivial"


class DescriptionType(Enum):
    """Markup of a description body."""

    TEXT = "text"
    MARKDOWN = "markdown"
    HTML = "html"


@dataclass(frozen=True)
class Label:
    """A single name/value label attached to a suite or test case."""

    name: str
    value: str

    def __post_init__(self) -> None:
        """Validate label invariants on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("label name must be a non-empty string")


@dataclass(frozen=True)
class Description:
    """Free-form description attached to a suite or test case."""

    value: str
    type: DescriptionType = DescriptionType.TEXT


@dataclass(frozen=True)
class Parameter:
    """A named parameter shown alongside a test case."""

    name: str
    value: str


@dataclass(frozen=True)
class TestSuiteRef:
    """Identity of a suite as seen by suite-level listener callbacks.

    data_provider marks pseudo-suites that a host runner creates to group
    parameterized variants of a single test. They never reach the report.
    """

    __test__ = False

    name: str
    data_provider: bool = False


@dataclass(frozen=True)
class ComparisonFailure:
    """Expected-versus-actual payload of a failed equality assertion."""

    expected: Any
    actual: Any
    diff: str

    @classmethod
    def from_values(cls, expected: Any, actual: Any) -> "ComparisonFailure":
        """Build a comparison failure, rendering a unified diff of both values."""
        expected_lines = pprint.pformat(expected).splitlines()
        actual_lines = pprint.pformat(actual).splitlines()
        diff_lines = difflib.unified_diff(
            expected_lines,
            actual_lines,
            fromfile="Expected",
            tofile="Actual",
            lineterm="",
        )
        return cls(expected=expected, actual=actual, diff="\n" + "\n".join(diff_lines))


class ExpectationFailedError(AssertionError):
    """Assertion failure that may carry a structured comparison."""

    def __init__(self, message: str, comparison_failure: ComparisonFailure | None = None):
        super().__init__(message)
        self.comparison_failure = comparison_failure


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _failure_summary(exception: BaseException | None, message: str | None) -> dict[str, Any] | None:
    """Render the exception and message attached to an event."""
    if exception is None and message is None:
        return None
    stack_trace = None
    if exception is not None:
        stack_trace = "".join(traceback.format_exception(exception))
    return {"message": message, "stack_trace": stack_trace}


@dataclass
class Event:
    """Base for every event fired at the event sink.

    Events are mutable until fired: the adapter attaches exception details
    and annotation metadata right before emission.
    """

    timestamp: datetime = field(default_factory=_utcnow, kw_only=True)
    exception: BaseException | None = field(default=None, kw_only=True)
    message: str | None = field(default=None, kw_only=True)

    def with_exception(self, exception: BaseException) -> "Event":
        self.exception = exception
        return self

    def with_message(self, message: str) -> "Event":
        self.message = message
        return self

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event to a JSON-compatible dict."""
        payload: dict[str, Any] = {
            "type": self.kind,
            "timestamp": self.timestamp.isoformat(),
        }
        failure = _failure_summary(self.exception, self.message)
        if failure is not None:
            payload["failure"] = failure
        payload.update(self._payload())
        return payload

    def _payload(self) -> dict[str, Any]:
        return {}


@dataclass
class _AnnotatedEvent(Event):
    """Event that can be enriched with annotation metadata."""

    title: str | None = field(default=None, kw_only=True)
    description: Description | None = field(default=None, kw_only=True)
    labels: list[Label] = field(default_factory=list, kw_only=True)

    def _metadata(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "title": self.title,
            "labels": [{"name": label.name, "value": label.value} for label in self.labels],
        }
        if self.description is not None:
            metadata["description"] = {
                "value": self.description.value,
                "type": self.description.type.value,
            }
        return metadata


@dataclass
class TestSuiteStartedEvent(_AnnotatedEvent):
    """A real suite started. Generates the suite's correlation token."""

    __test__ = False

    name: str
    uuid: str = field(default_factory=lambda: str(uuid.uuid4()))

    def _payload(self) -> dict[str, Any]:
        return {"uuid": self.uuid, "name": self.name, **self._metadata()}


@dataclass
class TestSuiteFinishedEvent(Event):
    """A real suite finished."""

    __test__ = False

    uuid: str

    def _payload(self) -> dict[str, Any]:
        return {"uuid": self.uuid}


@dataclass
class TestCaseStartedEvent(_AnnotatedEvent):
    """A concrete test case started inside the suite identified by suite_uuid."""

    __test__ = False

    suite_uuid: str | None
    name: str
    parameters: list[Parameter] = field(default_factory=list, kw_only=True)

    def _payload(self) -> dict[str, Any]:
        return {
            "suite_uuid": self.suite_uuid,
            "name": self.name,
            "parameters": [{"name": p.name, "value": p.value} for p in self.parameters],
            **self._metadata(),
        }


@dataclass
class _TestCaseEvent(Event):
    """Test case event scoped to the active suite."""

    suite_uuid: str | None = None

    def _payload(self) -> dict[str, Any]:
        return {"suite_uuid": self.suite_uuid}


@dataclass
class TestCaseFinishedEvent(_TestCaseEvent):
    """The active test case finished."""

    __test__ = False


@dataclass
class TestCaseFailedEvent(_TestCaseEvent):
    """The active test case failed an assertion."""

    __test__ = False


@dataclass
class TestCaseBrokenEvent(_TestCaseEvent):
    """The active test case raised an unexpected error."""

    __test__ = False


@dataclass
class TestCaseCanceledEvent(_TestCaseEvent):
    """The active test case was skipped."""

    __test__ = False


@dataclass
class TestCasePendingEvent(_TestCaseEvent):
    """The active test case is incomplete or risky."""

    __test__ = False
