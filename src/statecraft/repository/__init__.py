"""Persistence adapters for Statecraft."""

from statecraft.repository.sql_store import (
    SqlGameStore,
    dump_policies,
    dump_resources,
    load_policies,
    load_resources,
)

__all__ = [
    "SqlGameStore",
    "dump_policies",
    "dump_resources",
    "load_policies",
    "load_resources",
]
