"""Logging configuration for Skyscrape."""

import logging
from datetime import datetime
from pathlib import Path

import logfire

from skyscrape.utils.files import get_logs_path


def configure_logfire(token: str | None = None) -> None:
    """Configure logfire, sending data only when a token is available.

    Args:
        token: Logfire write token. Without one, spans stay local.

    """
    logfire.configure(token=token, send_to_logfire='if-token-present', console=False)


def setup_local_logging(level: str = 'INFO', log_to_file: bool = True) -> Path | None:
    """Set up root logger output.

    Adds a stream handler and, optionally, a timestamped log file in
    .skyscrape/logs/.

    Args:
        level: Logging level (e.g., 'DEBUG', 'INFO'). 'ALL' logs everything.
        log_to_file: Whether to also write a log file.

    Returns:
        Path: The path to the created log file, or None.

    """
    # Map string level to numeric logging level
    if level.upper() == 'ALL':
        numeric_level = logging.NOTSET
    else:
        numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(numeric_level)
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if not log_to_file:
        return None

    logs_dir = get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = logs_dir / f'run_{timestamp}.log'

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(numeric_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    return log_file
