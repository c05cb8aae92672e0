"""edscal - extract calendar events from Evolution Data Server D-Bus dumps.

Reads text containing raw iCalendar VEVENT blocks (typically ``gdbus call``
output), keeps the titled events that overlap a date range and prints them
as a JSON array.

The package keeps imports light at module import time; the CLI pulls in the
pipeline lazily from run_extractor().
"""

__version__ = "0.1.0"

import sys
from typing import Any, Optional, TextIO


def _read_input(path: Optional[str], stdin: TextIO) -> str:
    """Read the whole input, replacing bytes that are not valid UTF-8."""
    if path and path != "-":
        with open(path, encoding="utf-8", errors="replace") as f:
            return f.read()
    buffer = getattr(stdin, "buffer", None)
    if buffer is not None:
        return buffer.read().decode("utf-8", errors="replace")
    return stdin.read()


def _write_output(text: str, stdout: TextIO) -> None:
    """Write one line of output as UTF-8 regardless of the locale encoding."""
    buffer = getattr(stdout, "buffer", None)
    if buffer is None:
        print(text, file=stdout)
        return
    stdout.flush()
    buffer.write((text + "\n").encode("utf-8"))
    buffer.flush()


def run_extractor(
    args: Optional[Any] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Run one extraction from parsed CLI arguments.

    Args:
        args: Namespace with start/end, input, env_file, verbose and sources options
        stdin: Input stream (defaults to sys.stdin)
        stdout: Output stream for the JSON result (defaults to sys.stdout)

    Returns:
        Process exit code: 0 on success (including empty output), 1 if the
        input file could not be read

    Behavior:
    - Initialize stderr logging (EDSCAL_DEBUG / EDSCAL_LOG_LEVEL / --verbose).
    - Resolve configuration once: START_DATE / END_DATE environment variables
      win over positional arguments; a .env file fills in missing variables.
    - Events mode (default): print the filtered events as JSON, or ``[]`` if
      serialization fails.
    - Sources mode (--sources): print calendar source metadata instead.
    """
    import logging
    from pathlib import Path

    from edscal.core.config_manager import ConfigManager
    from edscal.logging_config import configure_logging, get_logging_status

    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    verbose = bool(getattr(args, "verbose", False))
    configure_logging(debug_mode=verbose)
    logger = logging.getLogger(__name__)

    env_file = getattr(args, "env_file", None)
    manager = ConfigManager(env_file_path=Path(env_file) if env_file else None)
    config = manager.load_full_config(
        getattr(args, "start", None),
        getattr(args, "end", None),
    )
    configure_logging(config.log_level, debug_mode=verbose)
    logger.debug("Logger levels: %s", get_logging_status())

    input_path = getattr(args, "input", None)
    try:
        text = _read_input(input_path, stdin)
    except OSError as e:
        logger.error("Cannot read input %s: %s", input_path, e)
        return 1

    if getattr(args, "sources", False):
        from edscal.eds.sources import extract_calendar_meta, extract_calendar_sources
        from edscal.serialization import serialize_models_or_empty

        sources = extract_calendar_meta(text, extract_calendar_sources(text))
        _write_output(serialize_models_or_empty(sources), stdout)
        return 0

    from edscal.calendar.event_parser import EventBlockParser
    from edscal.domain.pipeline import extract_events
    from edscal.serialization import serialize_events_or_empty

    parser = EventBlockParser(config.calendar_name, config.calendar_color)
    events = extract_events(text, config.date_range, parser)
    logger.debug("Emitting %d events for range %s", len(events), config.date_range)

    _write_output(serialize_events_or_empty(events), stdout)
    return 0
