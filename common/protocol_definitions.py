"""
Protocol definitions for the chat room client.

This module defines the message structure exchanged with the chat server and
the JSON text frames it travels in:

    {"type": "join", "userId": ..., "roomId": ..., "timestamp": ...}
    {"type": "message", "userId": ..., "roomId": ...,
     "content": {"text": ...}, "timestamp": ...}
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union

from common.constants import MessageTypes
from common.exceptions import FrameDecodeError


@dataclass(frozen=True)
class Message:
    """Chat message structure."""
    type: str
    user_id: str
    room_id: Optional[str]
    timestamp: datetime
    text: Optional[str] = None

    @property
    def is_join(self) -> bool:
        return self.type == MessageTypes.JOIN

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation, keys in protocol order."""
        data: Dict[str, Any] = {
            "type": self.type,
            "userId": self.user_id,
        }
        if self.room_id is not None:
            data["roomId"] = self.room_id
        if self.type == MessageTypes.MESSAGE:
            data["content"] = {"text": self.text}
        data["timestamp"] = format_timestamp(self.timestamp)
        return data


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    text = timestamp.astimezone(timezone.utc).isoformat(timespec='milliseconds')
    return text.replace('+00:00', 'Z')


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    text = value.strip()
    if text[-1:] in ('Z', 'z'):
        text = text[:-1] + '+00:00'
    timestamp = datetime.fromisoformat(text)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def create_join_message(user_id: str, room_id: str,
                        timestamp: Optional[datetime] = None) -> Message:
    """Create a join message announcing presence in a room."""
    return Message(
        type=MessageTypes.JOIN,
        user_id=user_id,
        room_id=room_id,
        timestamp=timestamp or utc_now(),
    )


def create_chat_message(user_id: str, room_id: str, text: str,
                        timestamp: Optional[datetime] = None) -> Message:
    """Create a chat message."""
    return Message(
        type=MessageTypes.MESSAGE,
        user_id=user_id,
        room_id=room_id,
        timestamp=timestamp or utc_now(),
        text=text,
    )


def encode_message(message: Message) -> str:
    """Serialize a message into a text frame."""
    return json.dumps(message.to_dict(), ensure_ascii=False)


def decode_frame(raw: Union[str, bytes], received_at: Optional[datetime] = None) -> Message:
    """
    Deserialize a text frame into a Message.

    Frames without a timestamp are stamped with ``received_at`` (or now).
    A plain string ``content`` is accepted as the message text.

    Raises:
        FrameDecodeError: if the frame is not a valid protocol message.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode('utf-8')
        except UnicodeDecodeError as e:
            raise FrameDecodeError(f"frame is not valid UTF-8: {e}", raw) from e

    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise FrameDecodeError(f"malformed JSON: {e}", raw) from e

    if not isinstance(data, dict):
        raise FrameDecodeError("frame is not a JSON object", raw)

    user_id = data.get('userId')
    if not isinstance(user_id, str) or not user_id:
        raise FrameDecodeError("frame has no userId", raw)

    msg_type = data.get('type', MessageTypes.MESSAGE)
    if msg_type not in MessageTypes.ALL:
        raise FrameDecodeError(f"unsupported message type: {msg_type!r}", raw)

    room_id = data.get('roomId')
    if room_id is not None and not isinstance(room_id, str):
        raise FrameDecodeError("roomId must be a string", raw)

    raw_timestamp = data.get('timestamp')
    if raw_timestamp is None:
        timestamp = received_at or utc_now()
    elif isinstance(raw_timestamp, str) and raw_timestamp.strip():
        try:
            timestamp = parse_timestamp(raw_timestamp)
            # Must convert to UTC and to local time for display
            timestamp.astimezone(timezone.utc)
            timestamp.astimezone()
        except (ValueError, OverflowError, OSError) as e:
            raise FrameDecodeError(f"invalid timestamp: {raw_timestamp!r}", raw) from e
    else:
        raise FrameDecodeError("timestamp must be an ISO-8601 string", raw)

    text = None
    if msg_type == MessageTypes.MESSAGE:
        text = _extract_text(data.get('content'), raw)

    return Message(
        type=msg_type,
        user_id=user_id,
        room_id=room_id,
        timestamp=timestamp,
        text=text,
    )


def _extract_text(content: Any, raw) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, dict) and isinstance(content.get('text'), str):
        return content['text']
    raise FrameDecodeError("message frame has no content.text", raw)
