"""Service layer for Statecraft.

Services depend on the :class:`~statecraft.interfaces.IGameStore` protocol:

- QuarterOrchestrator: claims, resolves and persists a quarter exactly once
- GameService: create / join / start / submit
- ResolutionScheduler: periodic sweep plus the durable job queue

Production Usage:
    from statecraft.factory import create_game_service
    games = create_game_service(session)

Testing Usage:
    service = GameService(FakeStore(), settings=Settings())
"""

from statecraft.services.game_service import GameService, SubmissionReceipt
from statecraft.services.resolution_service import QuarterOrchestrator, QuarterResolution
from statecraft.services.scheduler import ResolutionScheduler, SweepReport

__all__ = [
    "GameService",
    "QuarterOrchestrator",
    "QuarterResolution",
    "ResolutionScheduler",
    "SubmissionReceipt",
    "SweepReport",
]
