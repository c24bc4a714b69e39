"""
User interfaces for the chat client.

- client_gui: PyQt6 desktop window
- console: terminal front end
"""
