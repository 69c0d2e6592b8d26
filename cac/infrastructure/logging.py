import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

def setup_logging(debug: bool = False, quiet: bool = False, log_path: Optional[Path] = None) -> logging.Logger:
    """
    Setup logging configuration for cac.

    Console output goes through rich on stderr. When log_path is given, the
    same records are also appended to that file.

    Args:
        debug: If True, enable DEBUG level logging (per-file decisions, commands)
        quiet: If True, only warnings and errors reach the console
        log_path: Optional path to a log file
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    handlers = [console_handler]

    if log_path:
        log_file = Path(log_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(message)s',
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.debug(f"Logging initialized (debug={'ON' if debug else 'OFF'}, log_file={log_path})")

    return logger
