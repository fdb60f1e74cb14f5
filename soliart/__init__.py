"""
SoliArt - Klondike Solitaire Rule Engine

A deterministic, single-writer game-state machine for Klondike solitaire.
The engine owns the game and supplies a renderer with snapshots:
- Card, pile, foundation and deck model
- Move legality and scoring
- Drag-and-drop interaction (drag, drop, double tap)
- Geometry hints for animating cards toward their targets
"""

__version__ = "0.1.0"
