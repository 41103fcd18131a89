"""Chat adapters: the Discord client and its admin commands."""
