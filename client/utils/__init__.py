"""Configuration and logging helpers for the chat client."""
