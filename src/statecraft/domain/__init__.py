"""Pure resolution rules for Statecraft.

This package holds every rule of the quarter resolution engine.  It exposes:

* Frozen dataclasses for player state, policy choices and outcomes (see :mod:`models`).
* Enumerations for minister portfolios, policy stances and lifecycle states.
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions: cabinet effects, interaction models, the macro
  resolver, scoring and the equilibrium driver.

Nothing here touches the database; the orchestrator in
:mod:`statecraft.services` loads state, calls these functions and persists
the results through a repository adapter.
"""

from . import (
    cabinet,
    defaults,
    enums,
    equilibrium,
    events,
    interactions,
    macro,
    models,
    rules_config,
    scoring,
    validation,
    world,
)

__all__ = [
    "cabinet",
    "defaults",
    "enums",
    "equilibrium",
    "events",
    "interactions",
    "macro",
    "models",
    "rules_config",
    "scoring",
    "validation",
    "world",
]
