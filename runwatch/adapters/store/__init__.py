"""Registry store adapters for persisting tracked entities.

Implementations:
- SQLite (zero-config, single-file)
"""
