"""
Stratego - Game-state engine for two-player networked Stratego.

Each player keeps a local board that only knows their own pieces. The
engine provides:
- Piece catalog and board model
- Setup placement
- Move legality checks
- Replay of the game service's event feed into the local board
- An in-memory authoritative game service with a REST API
"""

__version__ = "0.1.0"
