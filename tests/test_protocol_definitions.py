#!/usr/bin/env python3
"""
Unit tests for common/protocol_definitions.py

Tests the JSON frame format:
- Outgoing join and message frames
- Timestamp formatting and parsing
- Decoding of valid and malformed inbound frames
"""

import json
import unittest
from datetime import datetime, timezone, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from common.constants import MessageTypes
from common.exceptions import FrameDecodeError
from common.protocol_definitions import (
    create_join_message, create_chat_message, encode_message, decode_frame,
    format_timestamp, parse_timestamp
)


FIXED_TIME = datetime(2024, 1, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)


class TestOutgoingFrames(unittest.TestCase):
    """Test cases for outgoing frame encoding."""

    def test_join_frame_shape(self):
        """Join frames carry type, userId, roomId and timestamp only."""
        frame = encode_message(create_join_message("User", "room1", FIXED_TIME))
        data = json.loads(frame)

        self.assertEqual(list(data.keys()), ["type", "userId", "roomId", "timestamp"])
        self.assertEqual(data["type"], "join")
        self.assertEqual(data["userId"], "User")
        self.assertEqual(data["roomId"], "room1")
        self.assertEqual(data["timestamp"], "2024-01-01T12:30:05.123Z")

    def test_message_frame_shape(self):
        """Message frames nest the text under content."""
        frame = encode_message(create_chat_message("User", "room1", "Hello", FIXED_TIME))
        data = json.loads(frame)

        self.assertEqual(list(data.keys()), ["type", "userId", "roomId", "content", "timestamp"])
        self.assertEqual(data["type"], "message")
        self.assertEqual(data["content"], {"text": "Hello"})

    def test_non_ascii_text_is_kept_verbatim(self):
        frame = encode_message(create_chat_message("User", "room1", "héllo ✓", FIXED_TIME))
        self.assertIn("héllo ✓", frame)

    def test_messages_default_to_current_time(self):
        before = datetime.now(timezone.utc)
        message = create_join_message("User", "room1")
        after = datetime.now(timezone.utc)
        self.assertTrue(before <= message.timestamp <= after)

    def test_message_is_immutable(self):
        message = create_chat_message("User", "room1", "Hello", FIXED_TIME)
        with self.assertRaises(AttributeError):
            message.text = "changed"


class TestTimestamps(unittest.TestCase):
    """Test cases for ISO-8601 handling."""

    def test_format_converts_to_utc(self):
        local = FIXED_TIME.astimezone(timezone(timedelta(hours=5)))
        self.assertEqual(format_timestamp(local), "2024-01-01T12:30:05.123Z")

    def test_parse_z_suffix(self):
        self.assertEqual(parse_timestamp("2024-01-01T00:00:00Z"),
                         datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_parse_offset(self):
        parsed = parse_timestamp("2024-01-01T02:00:00+02:00")
        self.assertEqual(parsed, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_parse_naive_is_utc(self):
        parsed = parse_timestamp("2024-01-01T00:00:00")
        self.assertEqual(parsed.tzinfo, timezone.utc)

    def test_parse_short_fractions(self):
        self.assertEqual(parse_timestamp("2024-01-01T00:00:00.1Z"),
                         datetime(2024, 1, 1, 0, 0, 0, 100000, tzinfo=timezone.utc))
        self.assertEqual(parse_timestamp("2024-01-01T00:00:00.12345Z"),
                         datetime(2024, 1, 1, 0, 0, 0, 123450, tzinfo=timezone.utc))

    def test_parse_basic_format(self):
        self.assertEqual(parse_timestamp("20240101T000000Z"),
                         datetime(2024, 1, 1, tzinfo=timezone.utc))


class TestDecodeFrame(unittest.TestCase):
    """Test cases for inbound frame decoding."""

    def test_decode_message(self):
        frame = ('{"type":"message","userId":"Bob","roomId":"room1",'
                 '"content":{"text":"Hi"},"timestamp":"2024-01-01T00:00:00Z"}')
        message = decode_frame(frame)

        self.assertEqual(message.type, MessageTypes.MESSAGE)
        self.assertEqual(message.user_id, "Bob")
        self.assertEqual(message.room_id, "room1")
        self.assertEqual(message.text, "Hi")
        self.assertEqual(message.timestamp, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_decode_join(self):
        message = decode_frame('{"type":"join","userId":"Bob","roomId":"room1",'
                               '"timestamp":"2024-01-01T00:00:00Z"}')
        self.assertTrue(message.is_join)
        self.assertIsNone(message.text)

    def test_decode_plain_string_content(self):
        """The legacy browser client sent content as a bare string."""
        message = decode_frame('{"type":"message","userId":"Bob","content":"Hi",'
                               '"timestamp":"2024-01-01T00:00:00Z"}')
        self.assertEqual(message.text, "Hi")
        self.assertIsNone(message.room_id)

    def test_decode_missing_type_defaults_to_message(self):
        message = decode_frame('{"userId":"Bob","content":{"text":"Hi"}}')
        self.assertEqual(message.type, MessageTypes.MESSAGE)

    def test_decode_missing_timestamp_uses_receipt_time(self):
        received_at = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)
        message = decode_frame('{"userId":"Bob","content":{"text":"Hi"}}', received_at=received_at)
        self.assertEqual(message.timestamp, received_at)

    def test_decode_bytes(self):
        message = decode_frame(b'{"userId":"Bob","content":{"text":"Hi"}}')
        self.assertEqual(message.text, "Hi")

    def test_malformed_frames(self):
        """Every malformed frame raises FrameDecodeError."""
        frames = [
            "not json",
            "",
            "[1, 2, 3]",
            '"just a string"',
            '{"type":"message","content":{"text":"Hi"}}',
            '{"type":"message","userId":"","content":{"text":"Hi"}}',
            '{"type":"typing","userId":"Bob"}',
            '{"type":"message","userId":"Bob"}',
            '{"type":"message","userId":"Bob","content":{"body":"Hi"}}',
            '{"type":"message","userId":"Bob","roomId":7,"content":{"text":"Hi"}}',
            '{"type":"message","userId":"Bob","content":{"text":"Hi"},"timestamp":"yesterday"}',
            '{"type":"message","userId":"Bob","content":{"text":"Hi"},"timestamp":12345}',
            '{"userId":"Bob","content":{"text":"Hi"},"timestamp":"0001-01-01T00:00:00+14:00"}',
            "[" * 100000 + "]" * 100000,
            '{"userId":"Bob","content":' + "{\"a\":" * 100000 + "1" + "}" * 100000 + "}",
            b'\xff\xfe{}',
        ]
        for frame in frames:
            with self.subTest(frame=frame):
                with self.assertRaises(FrameDecodeError):
                    decode_frame(frame)

    def test_decode_error_keeps_reason_and_frame(self):
        with self.assertRaises(FrameDecodeError) as ctx:
            decode_frame("not json")
        self.assertIn("malformed JSON", ctx.exception.reason)
        self.assertEqual(ctx.exception.frame, "not json")


if __name__ == '__main__':
    unittest.main()
