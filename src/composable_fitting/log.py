"""Logging setup for the package logger."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional, Union

PACKAGE_LOGGER = "composable_fitting"


def setup_logger(
    level: Union[int, str] = logging.INFO, log_dir: Optional[str] = None
) -> logging.Logger:
    """Attach handlers to the ``composable_fitting`` logger.

    Parameters
    ----------
    level : int or str
        Logging level for the package logger and its console handler.
    log_dir : str, optional
        If given, also write a timestamped ``fit_<YYYYmmdd_HHMMSS>.log`` file
        there (the directory is created when missing).

    Returns
    -------
    logger : logging.Logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(console_handler)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"fit_{timestamp}.log")
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)
        logger.debug("Log file: %s", log_file)

    return logger
