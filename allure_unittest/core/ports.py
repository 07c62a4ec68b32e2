"""Port interfaces for the Allure unittest adapter.

These abstract base classes define the boundaries between core
translation logic and the outside world. Implementations live in the
core (the adapter itself) and in the adapters/ package.

Port Interface Categories:

1. **Driving Ports** (host test runner calls into core)
   - TestListener: Lifecycle notifications from the host test runner

2. **Driven Ports** (core calls out to adapters)
   - EventSinkPort: Ordered collector of report events
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .models import Event, TestSuiteRef


# ============================================================================
# DRIVING PORTS (Host runner calls into core)
# ============================================================================


class TestListener(ABC):
    """Port for receiving lifecycle notifications from a host test runner.

    The host runner binding invokes these methods sequentially, in the
    order tests execute. Implementations may assume single-threaded use.

    The test argument is whatever the host runner uses to identify a test;
    for unittest that is a TestCase instance, or a placeholder object for
    errors raised outside of any test (class and module fixtures).
    """

    __test__ = False

    @abstractmethod
    def add_error(self, test: Any, exception: BaseException, time: float) -> None:
        """An unexpected error occurred while running a test.

        Args:
            test: The test that raised.
            exception: The raised exception.
            time: Seconds elapsed since the test started.
        """

    @abstractmethod
    def add_warning(self, test: Any, exception: BaseException, time: float) -> None:
        """A warning was reported for a test."""

    @abstractmethod
    def add_failure(self, test: Any, exception: AssertionError, time: float) -> None:
        """An assertion failed while running a test."""

    @abstractmethod
    def add_incomplete_test(self, test: Any, exception: BaseException, time: float) -> None:
        """A test was marked incomplete."""

    @abstractmethod
    def add_risky_test(self, test: Any, exception: BaseException, time: float) -> None:
        """A test was flagged as risky."""

    @abstractmethod
    def add_skipped_test(self, test: Any, exception: BaseException, time: float) -> None:
        """A test was skipped.

        Host runners may report a skip without ever announcing the test
        start, e.g. when the skip is decided before set-up runs.
        """

    @abstractmethod
    def start_test_suite(self, suite: TestSuiteRef) -> None:
        """A suite started."""

    @abstractmethod
    def end_test_suite(self, suite: TestSuiteRef) -> None:
        """A suite ended."""

    @abstractmethod
    def start_test(self, test: Any) -> None:
        """A test started."""

    @abstractmethod
    def end_test(self, test: Any, time: float) -> None:
        """A test ended, whatever its outcome."""


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class EventSinkPort(ABC):
    """Port for the process-wide, ordered collector of report events.

    A single sink is constructed at process start and handed to every
    adapter. Implementations must preserve the order in which fire() is
    called.
    """

    @property
    @abstractmethod
    def output_directory(self) -> Path | None:
        """Directory where report artifacts are written, None until configured."""

    @abstractmethod
    def configure(self, output_directory: Path) -> None:
        """Set the output directory.

        Only the first call has an effect. Later calls must leave an
        already-configured directory untouched.
        """

    @abstractmethod
    def fire(self, event: Event) -> None:
        """Accept one event.

        Raises:
            Exception: If the event cannot be recorded. Callers decide
                whether to propagate.
        """
