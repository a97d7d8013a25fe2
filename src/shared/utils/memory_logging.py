"""
Memory-stamped stage logging for long-running workers.

Each line carries an ISO timestamp, resident memory and a stage name:
    2025-01-11T10:30:45.123 | 512.3MB | PROVIDER_CALL | generation 42
"""

import logging
import os
from datetime import datetime

import psutil


def log_with_memory(logger: logging.Logger, stage: str, message: str) -> None:
    memory_mb = psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024
    timestamp = datetime.now().isoformat()
    logger.info(f"{timestamp} | {memory_mb:.1f}MB | {stage} | {message}")
