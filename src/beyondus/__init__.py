"""Beyond Us: authoritative game session for a social-deduction party game."""

from .core import GameConfig, GameSession

__version__ = "0.1.0"

__all__ = ["GameConfig", "GameSession", "__version__"]
