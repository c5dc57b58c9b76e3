"""Shared helpers."""

from .logging import configure_logging, resolve_log_file, setup_logging

__all__ = ["configure_logging", "resolve_log_file", "setup_logging"]
