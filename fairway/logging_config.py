"""Centralized logging configuration for the Fairway league engine.

Calculation modules never configure logging themselves. They log recoverable
data-quality fallbacks (NaN inputs, contradictory caps, unknown presets) as
warnings on ``fairway.<module>`` loggers; whoever embeds the engine decides
where those warnings go by attaching handlers here or on the root logger.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = 'fairway'


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``fairway`` logger.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Whether to log to a timestamped file (default: False)
        log_to_console: Whether to log to stdout (default: True)

    Returns:
        Configured logger instance

    Example:
        from fairway.logging_config import setup_logging
        logger = setup_logging(level=logging.DEBUG)
        logger.info("Recalculating handicaps")
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(name)s: %(message)s')

    if log_to_file:
        if log_dir is None:
            log_dir = Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'fairway_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the ``fairway`` namespace.

    Args:
        name: Logger name, either fully qualified or a bare module name
              ('handicap' becomes 'fairway.handicap')

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f'{ROOT_LOGGER_NAME}.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)
