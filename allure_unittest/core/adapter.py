"""Translation of host test runner callbacks into report events.

AllureAdapter implements TestListener. Each callback builds one event,
attaches exception details and annotation metadata, and fires it at the
injected event sink in call order.

The adapter assumes the host runner is single-threaded: only the
lifecycle callbacks write the active suite and test state.
"""

import logging
import os
import unittest
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .annotations import (
    AnnotationError,
    AnnotationManager,
    AnnotationProvider,
    resolve_class,
)
from .models import (
    Event,
    ExpectationFailedError,
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
from .ports import EventSinkPort, TestListener

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIRECTORY = os.path.join("build", "allure-results")


def _is_test_case(test: Any) -> bool:
    return isinstance(test, unittest.TestCase)


def _method_name(test: unittest.TestCase) -> str:
    """Bare method name, shared by every subtest of the same method."""
    parent = getattr(test, "test_case", None)
    if isinstance(parent, unittest.TestCase):
        test = parent
    return test._testMethodName


def _display_name(test: unittest.TestCase) -> str:
    """Method name, followed by the subtest parameters when there are any."""
    name = _method_name(test)
    describe = getattr(test, "_subDescription", None)
    if describe is not None:
        return f"{name} {describe()}"
    return name


def _test_class(test: unittest.TestCase) -> type:
    parent = getattr(test, "test_case", None)
    return type(parent) if isinstance(parent, unittest.TestCase) else type(test)


class AllureAdapter(TestListener):
    """Converts test runner lifecycle callbacks into report events."""

    def __init__(
        self,
        sink: EventSinkPort,
        output_directory: str | os.PathLike[str] | None = None,
        delete_previous_results: bool = False,
        ignored_annotations: Iterable[str] = (),
    ):
        """Initialize the adapter and prepare the output directory.

        Args:
            sink: Process-wide event sink. Its output directory is set here
                unless an earlier adapter already set it.
            output_directory: Where report artifacts go. Defaults to
                build/allure-results.
            delete_previous_results: Remove files left in the output
                directory by an earlier run.
            ignored_annotations: Extra docstring tags to ignore, on top of
                the built-in set.

        Raises:
            OSError: If the output directory cannot be created or purged.
        """
        self._sink = sink
        self._suite_uuid: str | None = None
        self._suite_name: str | None = None
        self._method_name: str | None = None

        if output_directory is None:
            output_directory = DEFAULT_OUTPUT_DIRECTORY
        self.output_directory = Path(output_directory)
        self.prepare_output_directory(self.output_directory, delete_previous_results)

        self.annotation_provider = AnnotationProvider(ignored_annotations)

    @property
    def suite_uuid(self) -> str | None:
        """Correlation token of the active suite."""
        return self._suite_uuid

    @property
    def suite_name(self) -> str | None:
        return self._suite_name

    @property
    def active_method_name(self) -> str | None:
        """Bare method name of the most recently started test."""
        return self._method_name

    def prepare_output_directory(self, output_directory: Path, delete_previous_results: bool) -> None:
        """Create the output directory and optionally purge files directly inside it.

        Subdirectories and their contents are left alone.
        """
        output_directory.mkdir(mode=0o755, parents=True, exist_ok=True)

        if delete_previous_results:
            removed = 0
            for entry in output_directory.iterdir():
                if entry.is_file():
                    entry.unlink()
                    removed += 1
            logger.info(
                f"Deleted {removed} previous result files from {output_directory}",
                extra={"output_directory": str(output_directory)},
            )

        if self._sink.output_directory is None:
            self._sink.configure(output_directory)
        elif self._sink.output_directory != output_directory:
            logger.debug(
                f"Event sink already writes to {self._sink.output_directory}, "
                f"ignoring {output_directory}"
            )

    def _fire(self, event: Event) -> None:
        try:
            self._sink.fire(event)
        except Exception as e:
            logger.error(
                f"Failed to record {event.kind}: {e}",
                extra={"suite_uuid": self._suite_uuid},
                exc_info=True,
            )

    @staticmethod
    def _update_event_info(event: Event, exception: BaseException, message: str | None = None) -> None:
        event.with_exception(exception)
        if message is not None:
            event.with_message(message)

    def _annotation_manager(self, lookup, *args: str) -> AnnotationManager | None:
        try:
            return AnnotationManager(lookup(*args))
        except AnnotationError as e:
            logger.warning(f"Ignoring annotations of {'.'.join(args)}: {e}")
            return None

    def add_error(self, test: Any, exception: BaseException, time: float) -> None:
        event = TestCaseBrokenEvent(self._suite_uuid)
        self._update_event_info(event, exception, str(exception))
        self._fire(event)

    def add_warning(self, test: Any, exception: BaseException, time: float) -> None:
        # Warnings have no report event.
        logger.debug(f"Dropping warning for {test}: {exception}")

    def add_failure(self, test: Any, exception: AssertionError, time: float) -> None:
        event = TestCaseFailedEvent(self._suite_uuid)

        message = str(exception)
        if isinstance(exception, ExpectationFailedError) and exception.comparison_failure:
            message += exception.comparison_failure.diff

        self._update_event_info(event, exception, message)
        self._fire(event)

    def add_incomplete_test(self, test: Any, exception: BaseException, time: float) -> None:
        event = TestCasePendingEvent(self._suite_uuid)
        self._update_event_info(event, exception)
        self._fire(event)

    def add_risky_test(self, test: Any, exception: BaseException, time: float) -> None:
        self.add_incomplete_test(test, exception, time)

    def add_skipped_test(self, test: Any, exception: BaseException, time: float) -> None:
        bracket = _is_test_case(test) and _method_name(test) != self._method_name
        if bracket:
            self.start_test(test)

        event = TestCaseCanceledEvent(self._suite_uuid)
        self._update_event_info(event, exception, str(exception))
        self._fire(event)

        if bracket:
            self.end_test(test, 0)

    def start_test_suite(self, suite: TestSuiteRef) -> None:
        if suite.data_provider:
            return

        event = TestSuiteStartedEvent(suite.name)
        self._suite_uuid = event.uuid
        self._suite_name = suite.name

        if resolve_class(suite.name) is not None:
            manager = self._annotation_manager(
                self.annotation_provider.get_class_annotations, suite.name
            )
            if manager is not None:
                manager.update_test_suite_event(event)

        logger.debug(f"Suite {suite.name} started", extra={"suite_uuid": event.uuid})
        self._fire(event)

    def end_test_suite(self, suite: TestSuiteRef) -> None:
        if suite.data_provider:
            return

        self._fire(TestSuiteFinishedEvent(self._suite_uuid))

    def start_test(self, test: Any) -> None:
        if not _is_test_case(test):
            return

        method_name = self._method_name = _method_name(test)
        event = TestCaseStartedEvent(self._suite_uuid, _display_name(test))

        cls = _test_class(test)
        class_name = f"{cls.__module__}.{cls.__qualname__}"
        # Classes defined inside functions cannot be looked up by name.
        if resolve_class(class_name) is cls and getattr(cls, method_name, None) is not None:
            manager = self._annotation_manager(
                self.annotation_provider.get_method_annotations,
                class_name,
                method_name,
            )
            if manager is not None:
                manager.update_test_case_event(event)

        self._fire(event)

    def end_test(self, test: Any, time: float) -> None:
        if _is_test_case(test):
            self._fire(TestCaseFinishedEvent(self._suite_uuid))
