"""
Everdell - Turn-based rules engine for the Everdell board game

A deterministic engine that validates and applies player inputs to a
serializable game state. It provides:
- State management with one-level undo
- Legal input generation
- Step-by-step effect resolution through a pending-input queue
- Per-viewer projections of hidden information
- Persistence, per-game locking and change notification
"""

__version__ = "0.1.0"
