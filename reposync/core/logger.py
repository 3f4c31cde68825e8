"""Logging configuration and utilities."""

import os
import sys
import logging
from datetime import datetime
from typing import Optional


def setup_logging(log_dir: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """Configure logging to both file and console.

    The console handler writes to stderr so the report printed on stdout
    stays readable; it only shows warnings unless ``verbose`` is set.

    Args:
        log_dir: Directory for log files (default: ./logs)
        verbose: Show INFO messages on the console

    Returns:
        Configured logger instance
    """
    # Create logs directory if it doesn't exist
    logs_dir = log_dir or os.path.join(os.getcwd(), 'logs')
    os.makedirs(logs_dir, exist_ok=True)

    # Create timestamp-based log filename
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = os.path.join(logs_dir, f'reposync_{timestamp}.log')

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            console_handler
        ],
        force=True  # Reset any existing configuration
    )

    logger = logging.getLogger('reposync')
    logger.info("Starting repository sync")
    logger.info(f"Log file: {log_file}")

    return logger
