"""
Console front end for the chat client.

Prints the transcript to a text stream and reads chat lines from stdin.
"""

import asyncio
import sys
import threading

from client.chat.chat_client import ChatClient
from client.chat.transcript import TranscriptRenderer, entry_to_text
from client.chat.transport import WebSocketTransport
from client.utils.config import ClientConfig
from client.utils.logger import logger

QUIT_COMMAND = '/quit'


class ConsoleSurface:
    """Display surface that prints plain-text entries."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.entries = []
        self.input_enabled = False
        self.placeholder = ''
        self.input_ready = asyncio.Event()

    def append_entry(self, entry):
        self.entries.append(entry)
        print(entry_to_text(entry), file=self.stream, flush=True)

    def scroll_to_bottom(self):
        # Terminals scroll on their own
        pass

    def set_input_enabled(self, enabled: bool):
        self.input_enabled = enabled
        if enabled:
            self.input_ready.set()

    def set_placeholder(self, text: str):
        self.placeholder = text
        print(f"-- {text}", file=self.stream, flush=True)


def _read_lines(loop, queue, stream):
    """Feed lines from a blocking stream into an asyncio queue; None marks EOF."""
    try:
        for line in iter(stream.readline, ''):
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, None)
    except RuntimeError:
        # Event loop already closed
        return


async def run_console_client(config: ClientConfig, stdin=None, stdout=None) -> bool:
    """Run an interactive chat session until EOF, /quit or disconnect."""
    surface = ConsoleSurface(stdout)
    transport = WebSocketTransport(config.open_timeout)
    chat_client = ChatClient(config, transport, TranscriptRenderer(surface), surface)

    if not chat_client.open():
        return False

    closed = asyncio.ensure_future(transport.wait_closed())
    try:
        # Input is only read once the connection is open
        ready = asyncio.ensure_future(surface.input_ready.wait())
        await asyncio.wait({ready, closed}, return_when=asyncio.FIRST_COMPLETED)
        if not ready.done():
            ready.cancel()
            return False

        loop = asyncio.get_running_loop()
        lines = asyncio.Queue()
        reader = threading.Thread(target=_read_lines, args=(loop, lines, stdin or sys.stdin), daemon=True)
        reader.start()
        logger.info(f"[INFO] Type messages to chat ({QUIT_COMMAND} or Ctrl+D to exit)")

        while True:
            next_line = asyncio.ensure_future(lines.get())
            done, _ = await asyncio.wait({next_line, closed}, return_when=asyncio.FIRST_COMPLETED)
            if next_line not in done:
                next_line.cancel()
                break

            line = next_line.result()
            if line is None or line.strip() == QUIT_COMMAND:
                break
            chat_client.send(line)
    finally:
        chat_client.close()
        await closed

    return True
