"""
Transcript rendering module.

Turns messages into timestamped entries on an append-only display surface.
A display surface provides ``append_entry(entry)`` and ``scroll_to_bottom()``.
"""

import html
from dataclasses import dataclass
from datetime import datetime

from client.utils.logger import logger
from common.constants import Direction, TIME_LABEL_FORMAT
from common.exceptions import TransportUnavailable
from common.protocol_definitions import Message


@dataclass(frozen=True)
class TranscriptEntry:
    """One rendered line of the transcript."""
    index: int
    direction: Direction
    user_id: str
    time_label: str
    text: str
    is_notice: bool = False


def format_time_label(timestamp: datetime) -> str:
    """Local hour:minute label for a message timestamp."""
    return timestamp.astimezone().strftime(TIME_LABEL_FORMAT)


def entry_to_html(entry: TranscriptEntry) -> str:
    """Markup for a rich-text surface; sender-supplied fields are escaped."""
    time_label = html.escape(entry.time_label)
    text = html.escape(entry.text)
    if entry.is_notice:
        return f'<span style="color: #95A5A6;">[{time_label}] {text}</span>'

    color = '#3498DB' if entry.direction == Direction.SENT else '#2ECC71'
    user_id = html.escape(entry.user_id)
    return (f'<span style="color: #95A5A6;">[{time_label}]</span> '
            f'<span style="color: {color};">{user_id}:</span> {text}')


def entry_to_text(entry: TranscriptEntry) -> str:
    """Plain-text form for terminal output; control characters are escaped."""
    text = _printable(entry.text)
    if entry.is_notice:
        return f"[{entry.time_label}] * {text}"
    marker = '>' if entry.direction == Direction.SENT else '<'
    return f"[{entry.time_label}] {marker} {_printable(entry.user_id)}: {text}"


def _printable(text: str) -> str:
    return ''.join(ch if ch.isprintable() else ascii(ch)[1:-1] for ch in text)


class TranscriptRenderer:
    """Renders messages onto a display surface in arrival order."""

    def __init__(self, surface=None):
        self.surface = surface
        self.entry_count = 0

    def render(self, message: Message, direction) -> TranscriptEntry:
        """
        Append one entry for ``message`` and scroll to it.

        Join messages are rendered as a notice instead of a chat line.
        Returns the entry, or None when there is no surface to render onto.
        """
        if self.surface is None:
            logger.log_error("render", TransportUnavailable("display surface is not available"))
            return None

        if message.is_join:
            text = f"{message.user_id} joined the room"
        else:
            text = message.text or ''

        entry = TranscriptEntry(
            index=self.entry_count,
            direction=Direction(direction),
            user_id=message.user_id,
            time_label=format_time_label(message.timestamp),
            text=text,
            is_notice=message.is_join,
        )
        self.surface.append_entry(entry)
        self.entry_count += 1
        self.surface.scroll_to_bottom()
        return entry
