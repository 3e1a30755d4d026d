"""
Treasure Hunter: an autonomous agent for a partially observable island.

The agent sees a 5x5 window around itself each turn, reconstructs the
island incrementally, plans tool-gated shortest paths with a two-phase
A* search, and picks one primitive action per turn from a fixed priority
list: fetch tools, explore, raft across water, blast through walls, and
bring the treasure home.
"""

from treasure_hunter.terrain import Action, Direction, TerrainKind
from treasure_hunter.grid import TerrainGrid
from treasure_hunter.world_model import ModelConfig, WorldModel
from treasure_hunter.pathfinder import Pathfinder
from treasure_hunter.decision import DecisionEngine, NoViableActionError
from treasure_hunter.hunt import HuntConfig, HuntResult, TreasureHunter

__version__ = "0.1.0"
__all__ = [
    "Action",
    "Direction",
    "TerrainKind",
    "TerrainGrid",
    "ModelConfig",
    "WorldModel",
    "Pathfinder",
    "DecisionEngine",
    "NoViableActionError",
    "HuntConfig",
    "HuntResult",
    "TreasureHunter",
]
