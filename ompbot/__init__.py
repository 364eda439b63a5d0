"""Telegram bot that routes /command__domain__subdomain messages to per-domain handlers."""

__version__ = "0.1.0"
__all__ = ["__version__"]