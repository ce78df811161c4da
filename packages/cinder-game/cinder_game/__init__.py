"""cinder-game - A running game session wiring actions, combat and sleep together."""
from cinder_game.session import GameSession

__all__ = ["GameSession"]
