"""
Simulated islands for running the agent end to end.

The agent only ever talks to an island through view() and step(action),
the same protocol as the real game server.
"""

from treasure_hunter.worlds.island import (
    Island,
    IslandConfig,
    Observation,
    make_corridor_island,
    make_fortress_island,
    make_key_door_island,
    make_lake_island,
)

__all__ = [
    "Island",
    "IslandConfig",
    "Observation",
    "make_corridor_island",
    "make_key_door_island",
    "make_lake_island",
    "make_fortress_island",
]
