"""
Terrain kinds, facings and primitive actions of the treasure hunt.

The world is an unbounded grid of cells addressed by (x, y) coordinates,
with x growing to the right and y growing upward. Each cell holds exactly
one terrain kind. The agent stands on a cell, faces one of four compass
directions and emits one primitive action per turn.

Passability is tool-gated:
- Plain ground and loose items can always be entered
- Trees need an axe, water needs a raft, doors need a key
- Walls, doors and trees can be cleared with dynamite
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, FrozenSet, List, Optional, Tuple

Coordinate = Tuple[int, int]


# ---------------------------------------------------------------------------
# Terrain
# ---------------------------------------------------------------------------

class TerrainKind(IntEnum):
    """What occupies a map cell."""
    UNEXPLORED = 0
    PLAIN = 1
    TREE = 2
    DOOR = 3
    WALL = 4
    WATER = 5
    AXE = 6
    KEY = 7
    DYNAMITE = 8
    TREASURE = 9

    @property
    def symbol(self) -> str:
        return TERRAIN_SYMBOLS[self]

    @staticmethod
    def from_symbol(symbol: str) -> Optional["TerrainKind"]:
        """
        Map a view symbol to its terrain kind.

        Agent markers return None: the agent's own cell is tracked
        separately and never read from the view.
        """
        if symbol in AGENT_SYMBOLS:
            return None
        try:
            return SYMBOL_TERRAIN[symbol]
        except KeyError:
            raise ValueError(f"Unknown view symbol {symbol!r}") from None


TERRAIN_SYMBOLS: Dict[TerrainKind, str] = {
    TerrainKind.UNEXPLORED: "?",
    TerrainKind.PLAIN: " ",
    TerrainKind.TREE: "T",
    TerrainKind.DOOR: "-",
    TerrainKind.WALL: "*",
    TerrainKind.WATER: "~",
    TerrainKind.AXE: "a",
    TerrainKind.KEY: "k",
    TerrainKind.DYNAMITE: "d",
    TerrainKind.TREASURE: "$",
}

EDGE_SYMBOL = "."

SYMBOL_TERRAIN: Dict[str, TerrainKind] = {
    symbol: kind for kind, symbol in TERRAIN_SYMBOLS.items()
}
# Cells beyond the edge of the island behave like walls
SYMBOL_TERRAIN[EDGE_SYMBOL] = TerrainKind.WALL

COLLECTIBLES: FrozenSet[TerrainKind] = frozenset({
    TerrainKind.AXE, TerrainKind.KEY, TerrainKind.DYNAMITE,
    TerrainKind.TREE, TerrainKind.DOOR,
})

MOVABLE: FrozenSet[TerrainKind] = frozenset({
    TerrainKind.PLAIN, TerrainKind.AXE, TerrainKind.KEY,
    TerrainKind.DYNAMITE, TerrainKind.TREASURE,
})

BLOWABLE: FrozenSet[TerrainKind] = frozenset({
    TerrainKind.WALL, TerrainKind.DOOR, TerrainKind.TREE,
})


def can_move_onto(kind: TerrainKind) -> bool:
    """Cells the agent can enter without any tool."""
    return kind in MOVABLE


def passable_kinds(have_axe: bool, have_key: bool,
                   have_raft: bool) -> FrozenSet[TerrainKind]:
    kinds = set(MOVABLE)
    if have_axe:
        kinds.add(TerrainKind.TREE)
    if have_key:
        kinds.add(TerrainKind.DOOR)
    if have_raft:
        kinds.add(TerrainKind.WATER)
    return frozenset(kinds)


def can_potentially_move_onto(kind: TerrainKind, have_axe: bool,
                              have_key: bool, have_raft: bool) -> bool:
    """Cells the agent can enter given the tools it holds."""
    if kind in MOVABLE:
        return True
    return ((kind == TerrainKind.TREE and have_axe) or
            (kind == TerrainKind.WATER and have_raft) or
            (kind == TerrainKind.DOOR and have_key))


def can_be_blown_up(kind: TerrainKind) -> bool:
    return kind in BLOWABLE


# ---------------------------------------------------------------------------
# Facings and actions
# ---------------------------------------------------------------------------

class Direction(IntEnum):
    """The four facings, numbered clockwise."""
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    def delta(self) -> Coordinate:
        """(dx, dy) displacement of one step in this direction."""
        return {
            Direction.UP: (0, 1),
            Direction.RIGHT: (1, 0),
            Direction.DOWN: (0, -1),
            Direction.LEFT: (-1, 0),
        }[self]

    def clockwise(self) -> "Direction":
        return Direction((self + 1) % 4)

    def counter_clockwise(self) -> "Direction":
        return Direction((self - 1) % 4)

    def opposite(self) -> "Direction":
        return Direction((self + 2) % 4)

    @staticmethod
    def all() -> List["Direction"]:
        return [Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT]

    @staticmethod
    def toward(source: Coordinate, target: Coordinate) -> "Direction":
        """
        Facing that points from source to target.

        Horizontal offset wins when both axes differ; callers only pass
        cells that share a row or column.
        """
        dx = target[0] - source[0]
        dy = target[1] - source[1]
        if dx != 0:
            return Direction.RIGHT if dx > 0 else Direction.LEFT
        return Direction.UP if dy > 0 else Direction.DOWN


class Action(str, Enum):
    """Primitive actions, valued by their wire symbol."""
    TURN_LEFT = "L"
    TURN_RIGHT = "R"
    MOVE_FORWARD = "F"
    CHOP_TREE = "C"
    UNLOCK_DOOR = "U"
    USE_DYNAMITE = "B"


AGENT_SYMBOLS: Dict[str, Direction] = {
    "^": Direction.UP,
    ">": Direction.RIGHT,
    "v": Direction.DOWN,
    "<": Direction.LEFT,
}


def step(coord: Coordinate, direction: Direction) -> Coordinate:
    dx, dy = direction.delta()
    return (coord[0] + dx, coord[1] + dy)


def manhattan(a: Coordinate, b: Coordinate) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
