"""Protocol-based interfaces for Statecraft services.

Services depend on these protocols so they can be exercised with
in-memory fakes.
"""

from statecraft.interfaces.store import IGameStore

__all__ = [
    "IGameStore",
]
