import logging
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

from connect4_solver.config import LOGGING_CONFIG


def setup_logging(level: Union[int, str, None] = None) -> None:
    """Configure root logging once, with a rich handler on stderr.

    Stdout is reserved for protocol output (diagnostic lines and boards), so log
    records never go there. Calling again only changes the level.
    """
    if level is None:
        level = LOGGING_CONFIG['level']
    if isinstance(level, str):
        level = level.upper()

    root_logger = logging.getLogger()
    if getattr(root_logger, "_c4_logging_configured", False):
        root_logger.setLevel(level)
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format=LOGGING_CONFIG['format'],
        datefmt=LOGGING_CONFIG['datefmt'],
        handlers=[handler],
        force=True,
    )
    root_logger._c4_logging_configured = True  # type: ignore[attr-defined]

    logging.captureWarnings(True)
