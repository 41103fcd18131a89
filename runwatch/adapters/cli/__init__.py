"""Command-line interface adapters.

Provides CLI commands for managing the tracked entities:
- add-runner: Start tracking a speedrun.com runner
- add-streamer: Start tracking a Twitch streamer
- list: Show tracked runners or streamers
"""
