"""
Client logging module.

This module handles client-side logging functionality.
"""

import logging
import sys

from common.constants import LOGGER_NAME


class ClientLogger:
    """Client logging class."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        self.console_handler = logging.StreamHandler(sys.stdout)
        self.console_handler.setLevel(log_level)

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(self.console_handler)

    def set_level(self, log_level):
        """Change the level of the logger and its console handler."""
        if isinstance(log_level, str):
            level = logging.getLevelName(log_level.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {log_level}")
            log_level = level
        self.logger.setLevel(log_level)
        self.console_handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, endpoint: str, success: bool):
        """Log connection attempt."""
        status = "Connected" if success else "Failed to connect"
        self.info(f"{status} to {endpoint}")

    def log_state_change(self, old_state, new_state):
        """Log connection state transition."""
        self.debug(f"Connection state: {old_state.value} -> {new_state.value}")

    def log_join(self, user_id: str, room_id: str):
        """Log join announcement."""
        self.info(f"Joined room '{room_id}' as '{user_id}'")

    def log_chat_sent(self, message: str):
        """Log chat message sent."""
        self.debug(f"Chat sent: {message}")

    def log_frame_dropped(self, reason: str, frame=None):
        """Log an inbound frame that could not be decoded."""
        if frame is None:
            self.warning(f"Dropped frame: {reason}")
        else:
            preview = str(frame)[:200]
            self.warning(f"Dropped frame: {reason} ({preview!r})")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
