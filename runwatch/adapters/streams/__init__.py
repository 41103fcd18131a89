"""Stream platform adapters for live status.

Implementations:
- Twitch Helix API
"""
