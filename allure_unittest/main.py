"""Composition root for the Allure unittest adapter.

This module is the ONLY location that imports both core translation
logic and concrete adapter implementations. All wiring of dependencies
happens here.

Module Structure:
- Configuration loading via config module
- Event sink instantiation (once per process)
- Adapter construction with the injected sink
- unittest runner and loader wiring
"""

import logging
import sys
import unittest

from allure_unittest.adapters.runner.unittest_runner import (
    AllureTestRunner,
    make_loader,
)
from allure_unittest.adapters.sink.json_files import JsonFileEventSink
from allure_unittest.config import Settings, load_settings
from allure_unittest.core.adapter import AllureAdapter
from allure_unittest.core.ports import EventSinkPort


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stdout belongs to the text runner
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def create_adapter(settings: Settings, sink: EventSinkPort | None = None) -> AllureAdapter:
    """Build an adapter wired to the given sink, or to a fresh JSON file sink.

    Raises:
        OSError: If the output directory cannot be prepared.
    """
    if sink is None:
        sink = JsonFileEventSink()
    return AllureAdapter(
        sink,
        output_directory=settings.output_directory,
        delete_previous_results=settings.delete_previous_results,
        ignored_annotations=settings.ignored_annotations,
    )


def bootstrap(settings: Settings | None = None) -> AllureTestRunner:
    """Load configuration, wire the adapter and return a ready runner.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate the event sink and adapter
    4. Build the text runner around the adapter
    """
    if settings is None:
        settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    adapter = create_adapter(settings)
    logger.info(f"Reporting to {adapter.output_directory}")

    return AllureTestRunner(listener=adapter, verbosity=settings.verbosity)


def main() -> None:
    """Run unittest's command line with the reporting runner and loader.

    Exit codes follow unittest: 0 on success, 1 on test failures,
    5 when no tests ran.
    """
    logger = logging.getLogger(__name__)
    try:
        runner = bootstrap()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    unittest.main(module=None, testRunner=runner, testLoader=make_loader())


if __name__ == "__main__":
    main()
