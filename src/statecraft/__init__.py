"""Statecraft: quarter resolution engine for a multiplayer economics game."""

__version__ = "0.1.0"
