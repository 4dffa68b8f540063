"""HTTP and WebSocket front end for a game session."""

from .main import create_app

__all__ = ["create_app"]
