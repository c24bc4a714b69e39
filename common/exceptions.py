"""
Error taxonomy for the chat room client.

None of these escape a public operation; they are raised internally and
reported through the client logger.
"""


class ChatClientError(Exception):
    """Base class for chat client errors."""


class TransportUnavailable(ChatClientError):
    """A collaborator the session depends on is missing or failed to start."""


class FrameDecodeError(ChatClientError):
    """An inbound frame is not a valid protocol message."""

    def __init__(self, reason: str, frame=None):
        super().__init__(reason)
        self.reason = reason
        self.frame = frame


class ConnectionClosed(ChatClientError):
    """The session has been closed and can no longer send."""
