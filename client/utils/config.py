"""
Client configuration module.

This module handles client-side configuration settings.
"""

import os
from urllib.parse import urlparse

from common.constants import DEFAULT_ENDPOINT, DEFAULT_USER_ID, DEFAULT_ROOM_ID, DEFAULT_OPEN_TIMEOUT


class ClientConfig:
    """Client configuration class."""

    def __init__(self, endpoint: str = DEFAULT_ENDPOINT, user_id: str = DEFAULT_USER_ID,
                 room_id: str = DEFAULT_ROOM_ID, open_timeout: float = DEFAULT_OPEN_TIMEOUT):
        parsed = urlparse(endpoint or '')
        if parsed.scheme not in ('ws', 'wss') or not parsed.netloc:
            raise ValueError(f"Endpoint must be a ws:// or wss:// URL, got {endpoint!r}")
        if not user_id or not user_id.strip():
            raise ValueError("user_id must not be blank")
        if not room_id or not room_id.strip():
            raise ValueError("room_id must not be blank")
        if open_timeout <= 0:
            raise ValueError("open_timeout must be positive")

        self.endpoint = endpoint
        self.user_id = user_id.strip()
        self.room_id = room_id.strip()
        self.open_timeout = float(open_timeout)

    @classmethod
    def from_env(cls, environ=None, **overrides):
        """Build a config from CHAT_* environment variables; non-None overrides win."""
        environ = os.environ if environ is None else environ
        values = {
            'endpoint': environ.get('CHAT_ENDPOINT', DEFAULT_ENDPOINT),
            'user_id': environ.get('CHAT_USER_ID', DEFAULT_USER_ID),
            'room_id': environ.get('CHAT_ROOM_ID', DEFAULT_ROOM_ID),
            'open_timeout': float(environ.get('CHAT_OPEN_TIMEOUT', DEFAULT_OPEN_TIMEOUT)),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def __repr__(self):
        return (f"ClientConfig(endpoint={self.endpoint!r}, user_id={self.user_id!r}, "
                f"room_id={self.room_id!r})")
