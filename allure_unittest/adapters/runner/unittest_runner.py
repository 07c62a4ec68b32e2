"""unittest binding for the TestListener port.

unittest's TestResult has no suite notifications, so class-level suites
are announced by ReportingTestSuite, which the loader builds in place of
unittest.TestSuite. Everything else is forwarded from the result
callbacks:

- addError             -> add_error
- addFailure           -> add_failure
- addSkip              -> add_skipped_test
- addExpectedFailure   -> add_incomplete_test
- addUnexpectedSuccess -> add_risky_test
- addSubTest           -> add_failure/add_error, first failing subtest only

A test reports at most one failure or error; later ones (an outer failure
after a failing subtest, a tearDown error after a failing body) only show
up in the text output.
"""

import logging
import time
import unittest
from typing import Any

from allure_unittest.core.models import TestSuiteRef
from allure_unittest.core.ports import TestListener

logger = logging.getLogger(__name__)


class UnexpectedSuccessError(Exception):
    """A test decorated with expectedFailure passed."""


class ReportingTestSuite(unittest.TestSuite):
    """TestSuite that announces itself when it groups the tests of one class.

    Container suites (modules, packages, discovery roots) are transparent.
    """

    def grouped_class(self) -> type | None:
        tests = list(self)
        if not tests or not all(isinstance(test, unittest.TestCase) for test in tests):
            return None
        classes = {type(test) for test in tests}
        if len(classes) != 1:
            return None
        return classes.pop()

    def suite_ref(self) -> TestSuiteRef | None:
        cls = self.grouped_class()
        if cls is None:
            return None
        return TestSuiteRef(name=f"{cls.__module__}.{cls.__qualname__}")

    def _tear_down_class(self, cls: type, result) -> None:
        """Run the class teardown now instead of when the next class starts.

        unittest tears a class down lazily, from inside the next suite. The
        previous class is then replaced by a fixture-free stand-in from the
        same module, so the class is not torn down twice and module
        fixtures are unaffected.
        """
        if getattr(result, "_previousTestClass", None) is not cls:
            return
        self._tearDownPreviousClass(None, result)
        result._previousTestClass = type(
            f"{cls.__name__}TornDown", (), {"__module__": cls.__module__}
        )

    def run(self, result, debug=False):
        cls = self.grouped_class()
        start = getattr(result, "start_test_suite", None)
        if cls is None or start is None:
            return super().run(result, debug)

        ref = self.suite_ref()
        start(ref)
        try:
            super().run(result, debug)
            # A top-level suite has already torn everything down.
            if not debug and getattr(result, "_testRunEntered", False):
                self._tear_down_class(cls, result)
            return result
        finally:
            result.end_test_suite(ref)


class AllureTestResult(unittest.TextTestResult):
    """Text result that also forwards every outcome to a TestListener.

    Without a listener it behaves exactly like unittest.TextTestResult.
    """

    def __init__(self, *args: Any, listener: TestListener | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.listener = listener
        self._started_at: float | None = None
        self._terminal_reported = False

    def _elapsed(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.perf_counter() - self._started_at

    def start_test_suite(self, suite: TestSuiteRef) -> None:
        if self.listener is not None:
            self.listener.start_test_suite(suite)

    def end_test_suite(self, suite: TestSuiteRef) -> None:
        if self.listener is not None:
            self.listener.end_test_suite(suite)

    def startTest(self, test):
        super().startTest(test)
        self._started_at = time.perf_counter()
        self._terminal_reported = False
        if self.listener is not None:
            self.listener.start_test(test)

    def stopTest(self, test):
        super().stopTest(test)
        if self.listener is not None:
            self.listener.end_test(test, self._elapsed())
        self._started_at = None

    def _report_terminal(self, test) -> bool:
        if self.listener is None:
            return False
        if self._started_at is None:
            # Class and module fixture errors arrive between tests.
            return True
        if self._terminal_reported:
            logger.debug(f"Not reporting additional failure of {test}")
            return False
        self._terminal_reported = True
        return True

    def addError(self, test, err):
        super().addError(test, err)
        if self._report_terminal(test):
            self.listener.add_error(test, err[1], self._elapsed())

    def addFailure(self, test, err):
        super().addFailure(test, err)
        if self._report_terminal(test):
            self.listener.add_failure(test, err[1], self._elapsed())

    def addSkip(self, test, reason):
        super().addSkip(test, reason)
        if self.listener is not None:
            self.listener.add_skipped_test(test, unittest.SkipTest(reason), self._elapsed())

    def addExpectedFailure(self, test, err):
        super().addExpectedFailure(test, err)
        if self.listener is not None:
            self.listener.add_incomplete_test(test, err[1], self._elapsed())

    def addUnexpectedSuccess(self, test):
        super().addUnexpectedSuccess(test)
        if self.listener is not None:
            self.listener.add_risky_test(
                test,
                UnexpectedSuccessError(f"{test} passed but was expected to fail"),
                self._elapsed(),
            )

    def addSubTest(self, test, subtest, err):
        super().addSubTest(test, subtest, err)
        if err is None or not self._report_terminal(subtest):
            return
        if issubclass(err[0], test.failureException):
            self.listener.add_failure(subtest, err[1], self._elapsed())
        else:
            self.listener.add_error(subtest, err[1], self._elapsed())


class AllureTestRunner(unittest.TextTestRunner):
    """TextTestRunner whose results report to a TestListener."""

    resultclass = AllureTestResult

    def __init__(self, *args: Any, listener: TestListener | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.listener = listener

    def _makeResult(self):
        result = super()._makeResult()
        result.listener = self.listener
        return result


def make_loader() -> unittest.TestLoader:
    """Return a loader whose class suites announce themselves to the result."""
    loader = unittest.TestLoader()
    loader.suiteClass = ReportingTestSuite
    return loader
