"""
Configuration management for Transfer Monitor.

Loads and validates settings from environment variables and an optional
project-root .env file. Exposes a single source of truth for the poller,
RPC client and CLI.
"""

from transfer_monitor.config.settings import MonitorSettings, get_settings  # noqa: F401

__all__ = ["MonitorSettings", "get_settings"]
