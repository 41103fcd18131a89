"""Notification adapters for posting and retracting announcements.

Implementations support multiple output channels:
- Discord channel (embeds via discord.py)
- Stdout (terminal pretty-print, for local runs)
"""
