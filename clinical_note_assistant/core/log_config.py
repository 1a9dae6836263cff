"""
Logging setup shared by every entry point.

Library modules only ever call `from loguru import logger`; sinks are
installed here, once, by whoever owns the process (the command line or a
host application).
"""

import sys

from loguru import logger

from clinical_note_assistant.core.constants import LOG_FORMAT


def configure_logging(level: str = "INFO", sink=sys.stderr) -> None:
    """
    Replace loguru's default sink with the package format.

    Args:
        level: Minimum level to emit (DEBUG shows dropped-entry traces)
        sink: Any loguru sink; stderr by default
    """
    logger.remove()
    logger.add(sink, level=level, format=LOG_FORMAT)
