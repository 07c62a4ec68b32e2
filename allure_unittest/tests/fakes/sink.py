"""Fake EventSinkPort implementation for testing."""

from pathlib import Path

from allure_unittest.core.models import Event
from allure_unittest.core.ports import EventSinkPort


class FakeEventSink(EventSinkPort):
    """In-memory event sink for testing.

    Captures all events fired through this port for test assertions.
    """

    def __init__(self, output_directory: Path | None = None):
        """Initialize with empty event history."""
        self._output_directory = output_directory
        self.configure_call_count = 0
        self.events: list[Event] = []
        self.fire_call_count = 0
        self.should_fail: bool = False
        self.fail_message: str = "Sink failed"

    @property
    def output_directory(self) -> Path | None:
        return self._output_directory

    def configure(self, output_directory: Path) -> None:
        self.configure_call_count += 1
        if self._output_directory is None:
            self._output_directory = output_directory

    def fire(self, event: Event) -> None:
        """Capture the event for test assertions."""
        self.fire_call_count += 1

        if self.should_fail:
            raise RuntimeError(self.fail_message)

        self.events.append(event)

    def kinds(self) -> list[str]:
        """Class names of the captured events, in emission order."""
        return [event.kind for event in self.events]

    def get_last_event(self) -> Event | None:
        """Get the most recent event, if any."""
        if self.events:
            return self.events[-1]
        return None

    def set_should_fail(self, should_fail: bool, message: str = "Sink failed") -> None:
        """Configure the sink to fail on the next fire."""
        self.should_fail = should_fail
        self.fail_message = message

    def reset(self) -> None:
        """Reset all collected events and state."""
        self.events.clear()
        self.fire_call_count = 0
        self.should_fail = False
        self.fail_message = "Sink failed"
