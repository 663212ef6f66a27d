"""
Note History Backend - version history and snapshot engine for collaborative notes

Durable, deduplicated snapshots of note state, race-safe version numbering and
transactional, history-preserving restores.
"""

__version__ = "1.0.0"
