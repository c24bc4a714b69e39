"""
Shared protocol code for the chat room client.

Handles:
- Message types and connection states
- Message structure and JSON frame encoding
- Error taxonomy
"""
