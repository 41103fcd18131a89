"""Scheduler adapters for driving the sweep loops.

Implementations:
- Daemon (asyncio loop, one task per tracked-entity class)
"""
