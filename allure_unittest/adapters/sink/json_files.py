"""JSON file event sink.

Implements EventSinkPort by writing every fired event to its own JSON
file. File names start with a zero-padded sequence number so that a
directory listing reproduces the emission order.
"""

import json
import logging
import uuid
from pathlib import Path

from allure_unittest.core.models import Event
from allure_unittest.core.ports import EventSinkPort

logger = logging.getLogger(__name__)


class SinkNotConfiguredError(RuntimeError):
    """An event was fired before the sink had an output directory."""


class JsonFileEventSink(EventSinkPort):
    """Writes one JSON artifact per event."""

    def __init__(self, output_directory: str | Path | None = None):
        """Initialize the sink.

        Args:
            output_directory: Optional directory to write to. When omitted,
                the first adapter constructed configures it.
        """
        self._output_directory: Path | None = None
        self._sequence = 0
        if output_directory is not None:
            self.configure(Path(output_directory))

    @property
    def output_directory(self) -> Path | None:
        return self._output_directory

    @property
    def events_written(self) -> int:
        return self._sequence

    def configure(self, output_directory: Path) -> None:
        if self._output_directory is not None:
            return
        self._output_directory = Path(output_directory)
        logger.info(f"Writing report events to {self._output_directory}")

    def _get_event_file_path(self) -> Path:
        """Compute the artifact path for the next event. No I/O."""
        assert self._output_directory is not None
        filename = f"{self._sequence + 1:06d}-{uuid.uuid4()}-event.json"
        return self._output_directory / filename

    def fire(self, event: Event) -> None:
        """Write the event to a new file.

        Raises:
            SinkNotConfiguredError: If no output directory was configured.
            OSError: If the file cannot be written.
        """
        if self._output_directory is None:
            raise SinkNotConfiguredError(
                f"Cannot record {event.kind}: output directory is not configured"
            )

        event_file = self._get_event_file_path()
        content = json.dumps(event.to_dict(), indent=2, default=str)
        try:
            event_file.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error(
                f"Failed to write event file: {e}",
                extra={"path": str(event_file)},
                exc_info=True,
            )
            raise

        self._sequence += 1
        logger.debug(f"Wrote {event.kind} to {event_file}")
