"""
Shared constants for the chat room client.

This module contains the defaults and enumerations used across the client.
"""

from enum import Enum

# Network Configuration
DEFAULT_ENDPOINT = 'ws://localhost:8080/chats'
DEFAULT_OPEN_TIMEOUT = 10.0  # seconds

# Session
DEFAULT_USER_ID = 'User'
DEFAULT_ROOM_ID = 'room1'

# Input placeholders
PLACEHOLDER_CONNECTED = 'Type your message...'
PLACEHOLDER_DISCONNECTED = 'Disconnected from chat server...'

# Transcript
TIME_LABEL_FORMAT = '%H:%M'

# Logging
LOGGER_NAME = 'chat_client'


# Message Types
class MessageTypes:
    JOIN = 'join'
    MESSAGE = 'message'

    ALL = (JOIN, MESSAGE)


class ConnectionState(str, Enum):
    """Lifecycle of one connection; CLOSED is terminal."""
    CONNECTING = 'connecting'
    OPEN = 'open'
    CLOSED = 'closed'


class Direction(str, Enum):
    """Presentation tag for a transcript entry."""
    SENT = 'sent'
    RECEIVED = 'received'
