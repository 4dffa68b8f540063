"""Autonomous bot participants."""

from .controller import BotController

__all__ = ["BotController"]
