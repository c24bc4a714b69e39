#!/usr/bin/env python3
"""
Client GUI - PyQt6 Chat Room

This module provides the desktop front end for the chat client.
Features:
- Scrolling transcript of sent and received messages
- Message input with Send button and Enter-to-send
- Input disabled until the connection is open, and again once it closes
- Websocket networking on a background thread
"""

import sys
import html
import asyncio
import threading

# PyQt6 imports
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QTextBrowser, QLineEdit, QPushButton
)
from PyQt6.QtCore import QThread, pyqtSignal

from client.chat.chat_client import ChatClient
from client.chat.transcript import TranscriptRenderer, entry_to_html
from client.chat.transport import WebSocketTransport
from client.utils.config import ClientConfig
from client.utils.logger import logger
from common.constants import PLACEHOLDER_DISCONNECTED
from common.exceptions import ConnectionClosed

CLOSE_WAIT_MS = 2000


# ============================================================================
# CHAT WIDGET
# ============================================================================

class ChatWidget(QWidget):
    """Chat interface with transcript and input. Acts as the display surface."""

    message_sent = pyqtSignal(str)  # message text

    def __init__(self):
        super().__init__()
        self.entries = []
        self.setup_ui()
        # Start disabled until connection is established
        self.set_input_enabled(False)
        self.set_placeholder(PLACEHOLDER_DISCONNECTED)

    def setup_ui(self):
        """Setup chat interface UI."""
        layout = QVBoxLayout()
        layout.setSpacing(5)
        layout.setContentsMargins(5, 5, 5, 5)

        # Transcript area
        self.chat_text = QTextBrowser()
        self.chat_text.setReadOnly(True)
        self.chat_text.setOpenLinks(False)
        self.chat_text.setOpenExternalLinks(False)
        self.chat_text.setStyleSheet("""
            QTextBrowser {
                background-color: #2C2C2C;
                color: #ECF0F1;
                border: 1px solid #34495E;
                border-radius: 5px;
                padding: 5px;
                font-size: 10pt;
            }
        """)
        layout.addWidget(self.chat_text)

        # Input area
        input_layout = QHBoxLayout()

        self.input_field = QLineEdit()
        self.input_field.setStyleSheet("""
            QLineEdit {
                background-color: #34495E;
                color: #ECF0F1;
                border: 1px solid #2C3E50;
                border-radius: 5px;
                padding: 5px;
            }
            QLineEdit:disabled {
                color: #7F8C8D;
            }
        """)
        self.input_field.returnPressed.connect(self.send_message)
        input_layout.addWidget(self.input_field)

        # Send button
        self.send_button = QPushButton("Send")
        self.send_button.clicked.connect(self.send_message)
        self.send_button.setStyleSheet("""
            QPushButton {
                background-color: #3498DB;
                color: white;
                border: none;
                padding: 8px 15px;
                border-radius: 5px;
                font-weight: bold;
            }
            QPushButton:hover {
                background-color: #2980B9;
            }
            QPushButton:disabled {
                background-color: #566573;
            }
        """)
        input_layout.addWidget(self.send_button)

        layout.addLayout(input_layout)
        self.setLayout(layout)

    def send_message(self):
        """Send chat message."""
        text = self.input_field.text().strip()
        if text:
            self.message_sent.emit(text)
        self.input_field.clear()

    def append_entry(self, entry):
        """Append a transcript entry."""
        self.chat_text.append(entry_to_html(entry))
        self.entries.append(entry)

    def scroll_to_bottom(self):
        """Keep the newest entry visible."""
        scrollbar = self.chat_text.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

    def add_system_message(self, text: str):
        """Add a local status line that is not part of the conversation."""
        self.chat_text.append(f'<span style="color: #95A5A6;"><i>{html.escape(text)}</i></span>')
        self.scroll_to_bottom()

    def set_input_enabled(self, enabled: bool):
        """Enable or disable the message input and Send button."""
        self.input_field.setEnabled(enabled)
        self.send_button.setEnabled(enabled)
        if enabled:
            self.input_field.setFocus()

    def set_placeholder(self, text: str):
        """Set the input placeholder."""
        self.input_field.setPlaceholderText(text)


# ============================================================================
# NETWORK THREAD
# ============================================================================

class NetworkThread(QThread):
    """Thread hosting the websocket transport on its own event loop.

    Transport events are re-emitted as signals so that handlers run on the
    GUI thread, one at a time, in arrival order.
    """

    opened = pyqtSignal()
    frame_received = pyqtSignal(object)
    closed = pyqtSignal()

    def __init__(self, open_timeout: float):
        super().__init__()
        self.endpoint = None
        self.loop = None
        self.close_requested = False
        self.loop_ready = threading.Event()
        self.transport = WebSocketTransport(open_timeout)
        self.transport.set_handlers(self.opened.emit, self.frame_received.emit, self.closed.emit)

    def set_handlers(self, on_open, on_message, on_close):
        """Route transport events to handlers on the GUI thread."""
        self.opened.connect(on_open)
        self.frame_received.connect(on_message)
        self.closed.connect(on_close)

    def connect(self, endpoint: str):
        """Start the network thread and connect to ``endpoint``."""
        self.endpoint = endpoint
        self.start()

    def run(self):
        """Run network loop."""
        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)
        self.loop_ready.set()
        try:
            self.loop.run_until_complete(self._connect_and_listen())
        finally:
            self.loop.close()

    async def _connect_and_listen(self):
        if self.close_requested:
            return
        self.transport.connect(self.endpoint)
        await self.transport.wait_closed()

    def send(self, text: str):
        """Send a frame from the GUI thread without blocking it."""
        if not self.loop_ready.is_set() or self.loop.is_closed():
            raise ConnectionClosed("network event loop is not running")
        try:
            self.loop.call_soon_threadsafe(self._send_in_loop, text)
        except RuntimeError as e:
            # Loop closed after the check
            raise ConnectionClosed("network event loop is not running") from e

    def _send_in_loop(self, text: str):
        try:
            self.transport.send(text)
        except Exception as e:
            logger.log_error("send", e)

    def close(self):
        """Close the connection from the GUI thread."""
        self.close_requested = True
        if self.loop is not None and not self.loop.is_closed():
            try:
                self.loop.call_soon_threadsafe(self.transport.close)
            except RuntimeError:
                # Loop finished between the check and the call
                pass


# ============================================================================
# MAIN WINDOW
# ============================================================================

class ChatWindow(QMainWindow):
    """Main application window."""

    def __init__(self, config: ClientConfig):
        super().__init__()
        self.config = config
        self.network_thread = None
        self.chat_client = None

        self.setup_ui()
        self.apply_dark_theme()

    def setup_ui(self):
        """Setup the main window UI."""
        self.setWindowTitle(f"Chat Room - {self.config.room_id}")
        self.setGeometry(100, 100, 640, 480)

        self.chat_widget = ChatWidget()
        self.setCentralWidget(self.chat_widget)

    def apply_dark_theme(self):
        """Apply dark theme styling."""
        self.setStyleSheet("""
            QMainWindow {
                background-color: #1A1A1A;
            }
            QWidget {
                background-color: #1A1A1A;
                color: #ECF0F1;
            }
        """)

    def connect_to_server(self) -> bool:
        """Create the chat session and start connecting."""
        self.chat_widget.add_system_message(f"Connecting to {self.config.endpoint}...")
        self.setWindowTitle(f"Chat Room - {self.config.room_id} (Connecting...)")

        self.network_thread = NetworkThread(self.config.open_timeout)
        self.network_thread.opened.connect(self.on_connected)
        self.network_thread.closed.connect(self.on_disconnected)

        self.chat_client = ChatClient(
            self.config,
            transport=self.network_thread,
            renderer=TranscriptRenderer(self.chat_widget),
            controls=self.chat_widget,
        )
        self.chat_widget.message_sent.connect(self.chat_client.send)
        return self.chat_client.open()

    def on_connected(self):
        """Handle successful connection."""
        self.setWindowTitle(f"Chat Room - {self.config.room_id} ({self.config.user_id})")

    def on_disconnected(self):
        """Handle disconnection."""
        self.chat_widget.add_system_message("Disconnected from chat server")
        self.setWindowTitle(f"Chat Room - {self.config.room_id} (Disconnected)")

    def closeEvent(self, event):
        """Close the session before the window goes away."""
        if self.chat_client is not None:
            self.chat_client.close()
        if self.network_thread is not None and not self.network_thread.wait(CLOSE_WAIT_MS):
            logger.warning(f"Network thread still running after {CLOSE_WAIT_MS} ms; waiting for it to stop")
            self.network_thread.wait()
        super().closeEvent(event)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main(config: ClientConfig = None):
    """Main entry point."""
    app = QApplication(sys.argv)

    config = config or ClientConfig.from_env()

    # Create and show window
    window = ChatWindow(config)
    window.show()

    # Connect to server
    if not window.connect_to_server():
        logger.error("[ERROR] Failed to start connection")

    # Run application
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
