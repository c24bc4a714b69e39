"""
Chat module for client-side messaging functionality.

Handles:
- Connection lifecycle and the join announcement
- Sending chat messages
- Receiving chat messages
- Rendering the transcript
"""
