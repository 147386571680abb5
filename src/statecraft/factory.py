"""Service Factory for Statecraft.

Wires services to the SQLAlchemy store. For testing, construct services
directly with a protocol-based fake store instead.

Example:
    # Production usage
    from statecraft.factory import create_orchestrator
    orchestrator = create_orchestrator(session)
    orchestrator.resolve(quarter_id)
"""

from sqlalchemy.orm import Session, sessionmaker

from statecraft.config import Settings
from statecraft.database import get_session_factory
from statecraft.repository import SqlGameStore
from statecraft.services.game_service import GameService
from statecraft.services.resolution_service import QuarterOrchestrator
from statecraft.services.scheduler import ResolutionScheduler


def create_game_store(session: Session) -> SqlGameStore:
    return SqlGameStore(session)


def create_orchestrator(session: Session) -> QuarterOrchestrator:
    """Create a QuarterOrchestrator bound to ``session``."""
    return QuarterOrchestrator(create_game_store(session))


def create_game_service(session: Session, settings: Settings | None = None) -> GameService:
    """Create a GameService bound to ``session``."""
    return GameService(create_game_store(session), settings=settings)


def create_scheduler(
    session_factory: sessionmaker[Session] | None = None,
    settings: Settings | None = None,
) -> ResolutionScheduler:
    """Create a ResolutionScheduler that opens a fresh session per unit of work.

    Args:
        session_factory: Session factory (defaults to the global one)
        settings: Settings override

    Returns:
        ResolutionScheduler ready to ``start()`` inside a running event loop
    """
    factory = session_factory or get_session_factory()
    return ResolutionScheduler(lambda: SqlGameStore(factory()), settings=settings)
