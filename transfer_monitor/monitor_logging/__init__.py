"""
Structured logging for Transfer Monitor.

Diagnostic events go to stderr as JSON (or console) records; stdout is
reserved for the transfer stream.
"""

from transfer_monitor.monitor_logging.logger import bind_slot, configure_structlog, get_logger

__all__ = ["bind_slot", "configure_structlog", "get_logger"]
