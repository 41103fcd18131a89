"""Speedrun data adapters for personal-bests and run metadata.

Implementations:
- speedrun.com REST API v1
"""
