"""Logging setup for jobpool."""

from jobpool.logging.log_paths import get_log_dir, get_main_log_path
from jobpool.logging.log_setup import setup_logging

__all__ = ["get_log_dir", "get_main_log_path", "setup_logging"]
