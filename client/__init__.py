"""
Client package for the chat room client.

This package contains all client-side functionality including:
- Connection lifecycle and messaging
- Transcript rendering
- User interfaces
- Configuration and utilities
"""
