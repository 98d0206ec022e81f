"""
Logging configuration for the wallet keeper.

Provides structured logging with:
- Timestamps
- Console output on stdout
- Daily rotated log file
- Separate error log
- A transfer audit log with one line per submitted transfer
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path
from typing import Optional


# Log directory (override with KEEPER_LOG_DIR)
LOG_DIR = Path(os.getenv("KEEPER_LOG_DIR", "logs"))

# Log formats
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

TRANSFER_LOGGER_NAME = "wallet_keeper.transfers"


def setup_logger(
    name: str = "wallet_keeper",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = True,
    detailed: bool = False,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Setup a logger with console and file handlers.

    Module loggers (``logging.getLogger(__name__)``) under ``wallet_keeper``
    propagate into the logger configured here.

    Args:
        name: Logger name (the package name by default)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file name (defaults to name.log)
        console: Whether to log to console
        detailed: Whether to use detailed format (includes file/line)
        log_dir: Directory for log files (defaults to LOG_DIR)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    log_format = DETAILED_FORMAT if detailed else SIMPLE_FORMAT
    formatter = logging.Formatter(log_format, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    if log_file is None:
        log_file = f"{name}.log"

    file_handler = TimedRotatingFileHandler(
        directory / log_file,
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    error_handler = RotatingFileHandler(
        directory / f"{name}_errors.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(error_handler)

    return logger


def setup_transfer_logger(log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Setup the transfer audit logger.

    Transfers are irreversible, so every one is written to a monthly file that
    never rotates. Records also propagate to the package logger for console
    output.
    """
    logger = logging.getLogger(TRANSFER_LOGGER_NAME)
    logger.setLevel(logging.INFO)

    if logger.handlers:
        return logger

    directory = Path(log_dir) if log_dir is not None else LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)

    audit_path = directory / f"transfers_{datetime.now().strftime('%Y%m')}.log"
    audit_handler = logging.FileHandler(audit_path, encoding="utf-8")
    audit_handler.setLevel(logging.INFO)
    audit_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(audit_handler)

    return logger


def log_transfer(
    logger: logging.Logger,
    from_address: str,
    to_address: str,
    amount: int,
    asset_id: str,
    tx_hash: Optional[str] = None,
    success: bool = True,
    reason: Optional[str] = None,
):
    """
    Log a transfer in structured format.

    Args:
        logger: Transfer audit logger
        from_address: Sending account
        to_address: Receiving account
        amount: Amount in base units
        asset_id: Asset address
        tx_hash: Transaction hash, when one was produced
        success: Whether the transfer was accepted by the ledger
        reason: Failure description
    """
    status = "SUCCESS" if success else "FAILED"
    msg = f"{status} | {from_address} -> {to_address} | Amount: {amount} | Asset: {asset_id}"
    if tx_hash:
        msg += f" | TX: {tx_hash}"
    if reason:
        msg += f" | Reason: {reason}"

    if success:
        logger.info(msg)
    else:
        logger.error(msg)
