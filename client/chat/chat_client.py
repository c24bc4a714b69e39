"""
Chat client module.

This module owns one chat session: it drives the transport connection
through connecting -> open -> closed, sends the join announcement and user
messages, and hands every outgoing and incoming message to the transcript.

Handlers are not thread-safe. The transport must deliver ``on_open``,
``on_receive`` and ``on_close`` one at a time on the thread that owns the
session.
"""

from typing import Optional

from client.chat.transcript import TranscriptRenderer
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import (
    ConnectionState, Direction, PLACEHOLDER_CONNECTED, PLACEHOLDER_DISCONNECTED
)
from common.exceptions import TransportUnavailable, FrameDecodeError, ConnectionClosed
from common.protocol_definitions import (
    Message, create_join_message, create_chat_message, encode_message, decode_frame, utc_now
)


class ChatClient:
    """Client-side chat session over a single transport connection."""

    def __init__(self, config: ClientConfig, transport=None,
                 renderer: Optional[TranscriptRenderer] = None, controls=None):
        self.config = config
        self.transport = transport
        self.renderer = renderer or TranscriptRenderer()
        self.controls = controls
        self.state = ConnectionState.CONNECTING
        self._started = False
        self._last_timestamp = None

    @property
    def user_id(self) -> str:
        return self.config.user_id

    @property
    def room_id(self) -> str:
        return self.config.room_id

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    def open(self) -> bool:
        """Start connecting to the configured endpoint."""
        if self._started or self.state != ConnectionState.CONNECTING:
            logger.warning("Session already started; open() ignored")
            return False
        self._started = True

        if self.transport is None:
            logger.log_error("open", TransportUnavailable("no transport configured"))
            self._set_state(ConnectionState.CLOSED)
            return False

        try:
            self.transport.set_handlers(self.on_open, self.on_receive, self.on_close)
            self.transport.connect(self.config.endpoint)
        except Exception as e:
            logger.log_connection(self.config.endpoint, False)
            logger.log_error("open", TransportUnavailable(str(e)))
            self._set_state(ConnectionState.CLOSED)
            return False

        logger.info(f"Connecting to {self.config.endpoint}...")
        return True

    def on_open(self):
        """Transport reported the connection open."""
        if self.state != ConnectionState.CONNECTING:
            logger.debug(f"Ignoring open event while {self.state.value}")
            return

        self._set_state(ConnectionState.OPEN)
        logger.log_connection(self.config.endpoint, True)
        self._set_inputs_enabled(True)

        join = create_join_message(self.user_id, self.room_id, self._next_timestamp())
        if self._transmit(join):
            logger.log_join(self.user_id, self.room_id)

    def send(self, text: str) -> Optional[Message]:
        """
        Send a chat message and echo it to the transcript.

        Whitespace-only text is discarded. Returns the sent message, or None
        if nothing was sent.
        """
        text = (text or '').strip()
        if not text:
            return None

        if not self.is_open:
            logger.log_error("send", ConnectionClosed(f"cannot send while {self.state.value}"))
            return None

        message = create_chat_message(self.user_id, self.room_id, text, self._next_timestamp())
        if not self._transmit(message):
            return None

        logger.log_chat_sent(text)
        self._render(message, Direction.SENT)
        return message

    def on_receive(self, raw_frame) -> Optional[Message]:
        """Decode an inbound frame and render it; bad frames are dropped."""
        if not self.is_open:
            logger.debug(f"Dropping frame received while {self.state.value}")
            return None

        try:
            message = decode_frame(raw_frame)
        except FrameDecodeError as e:
            logger.log_frame_dropped(e.reason, raw_frame)
            return None

        self._render(message, Direction.RECEIVED)
        return message

    def on_close(self):
        """Transport reported the connection closed. Terminal."""
        if self.state == ConnectionState.CLOSED:
            return

        self._set_state(ConnectionState.CLOSED)
        logger.info("Disconnected from chat server")
        self._set_inputs_enabled(False)

    def close(self):
        """End the session; later transport events for it are ignored."""
        if self.state == ConnectionState.CLOSED:
            return

        if self.transport is not None and self._started:
            try:
                self.transport.close()
            except Exception as e:
                logger.log_error("close", e)
        self.on_close()

    def _set_state(self, new_state: ConnectionState):
        old_state, self.state = self.state, new_state
        logger.log_state_change(old_state, new_state)

    def _set_inputs_enabled(self, enabled: bool):
        if self.controls is None:
            logger.log_error("set_inputs_enabled", TransportUnavailable("input controls are not available"))
            return

        self.controls.set_input_enabled(enabled)
        self.controls.set_placeholder(PLACEHOLDER_CONNECTED if enabled else PLACEHOLDER_DISCONNECTED)

    def _transmit(self, message: Message) -> bool:
        try:
            self.transport.send(encode_message(message))
            return True
        except Exception as e:
            logger.log_error(f"send {message.type}", e)
            return False

    def _render(self, message: Message, direction: Direction):
        try:
            self.renderer.render(message, direction)
        except Exception as e:
            logger.log_error("render", e)

    def _next_timestamp(self):
        # Outgoing timestamps never go backwards within a session.
        now = utc_now()
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now
