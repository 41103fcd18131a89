"""External adapters for the runwatch notification system.

This package contains all external dependencies (speedrun.com, Twitch,
SQLite, Discord, etc.) and provides implementations of the core port
interfaces.

Adapter Organization:

- speedrun/: Adapters for personal-bests and run metadata (speedrun.com)
- streams/: Adapters for live stream status (Twitch)
- store/: Adapters for the registry of tracked entities (SQLite)
- notification/: Adapters for posting announcements (Discord, stdout)
- scheduler/: Adapters for driving the sweep loops (daemon)
- chat/: Discord client and admin chat commands
- cli/: Command-line interface and management commands
"""
