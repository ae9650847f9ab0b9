# utils/logger.py
import logging
import os
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    logger_name: str = "Warehouse",
    log_file: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_dir: str = "logs"
) -> logging.Logger:
    """
    Set up and return a logger writing to a log file and the console.

    Module loggers of the pipeline live under "Warehouse.*", so configuring
    the "Warehouse" logger captures all of them.

    Args:
        logger_name: Name of the logger
        log_file: Optional specific log filename (default: {logger_name}.log)
        level: Logging level, as a number or a name such as "DEBUG" (default: INFO)
        log_dir: Directory for log files (default: logs)

    Returns:
        Configured logger instance
    """
    os.makedirs(log_dir, exist_ok=True)

    if log_file is None:
        log_file = f"{logger_name.lower().replace(' ', '_')}.log"
    log_path = os.path.join(log_dir, log_file)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates when called twice
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.debug(f"Log file is being saved to: {os.path.abspath(log_path)}")

    return logger
