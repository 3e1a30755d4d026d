"""
Island environment — the treasure hunt game the agent plays.

An island is a rectangle of terrain symbols with exactly one agent marker
(^ > v <) giving the start cell and the true starting facing. The agent
sees only a 5x5 window around itself, always rotated so that it faces the
top row, and acts through step(action).

Game rules:
- Walls, doors and trees block movement
- Stepping onto water without a raft drowns the agent
- Stepping from water onto land loses the raft
- Axes, keys, dynamite and the treasure are picked up by walking onto them
- Chopping a tree needs an axe and yields a raft
- Unlocking a door needs a key
- Dynamite clears a wall, door or tree
- Returning to the start cell with the treasure wins
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from treasure_hunter.terrain import (
    AGENT_SYMBOLS,
    BLOWABLE,
    EDGE_SYMBOL,
    SYMBOL_TERRAIN,
    Action,
    Direction,
    TerrainKind,
    can_move_onto,
)

# (row, col) displacement, row 0 at the top of the layout
_ROW_COL_DELTAS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}


@dataclass
class Observation:
    """What the agent is shown after each step."""
    view: List[str]                 # Egocentric 5x5 window
    done: bool                      # Episode over?
    won: bool                       # Treasure brought home?
    turn: int

    def __repr__(self) -> str:
        return f"Obs(turn={self.turn}, done={self.done}, won={self.won})"


@dataclass
class IslandConfig:
    """Configuration for building an island."""
    layout: List[str] = field(default_factory=list)
    window_size: int = 5
    max_turns: int = 10000


class Island:
    """
    A treasure hunt island.

    The agent interacts via view() and step(action); its position and
    facing on the real map stay hidden from it.
    """

    def __init__(self, config: IslandConfig):
        self.config = config
        self._build_grid()
        self.reset()

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "Island":
        rows = [line for line in text.splitlines() if line]
        return cls(IslandConfig(layout=rows, **kwargs))

    def _build_grid(self) -> None:
        """Parse the layout into terrain codes and locate the agent."""
        layout = self.config.layout
        if not layout:
            raise ValueError("Island layout is empty")
        width = max(len(row) for row in layout)
        self.grid = np.full((len(layout), width), int(TerrainKind.PLAIN),
                            dtype=np.int8)

        starts = []
        for r, row in enumerate(layout):
            for c, symbol in enumerate(row.ljust(width)):
                if symbol in AGENT_SYMBOLS:
                    starts.append(((r, c), AGENT_SYMBOLS[symbol]))
                    continue
                if symbol not in SYMBOL_TERRAIN or symbol == EDGE_SYMBOL:
                    raise ValueError(
                        f"Unknown island symbol {symbol!r} at row {r}, col {c}"
                    )
                self.grid[r, c] = int(SYMBOL_TERRAIN[symbol])

        if len(starts) != 1:
            raise ValueError(
                f"Island layout needs exactly one agent marker, found {len(starts)}"
            )
        self.start, self.start_direction = starts[0]
        self._initial_grid = self.grid.copy()

    def reset(self) -> Observation:
        """Restore the island and put the agent back at the start."""
        self.grid = self._initial_grid.copy()
        self.position: Tuple[int, int] = self.start
        self.direction: Direction = self.start_direction
        self.have_axe = False
        self.have_key = False
        self.have_raft = False
        self.have_treasure = False
        self.dynamite_count = 0
        self.on_water = False
        self.turns = 0
        self.done = False
        self.won = False
        self.drowned = False
        return self._make_observation()

    def _in_bounds(self, row: int, col: int) -> bool:
        rows, cols = self.grid.shape
        return 0 <= row < rows and 0 <= col < cols

    def _ahead(self) -> Tuple[int, int]:
        dr, dc = _ROW_COL_DELTAS[self.direction]
        return self.position[0] + dr, self.position[1] + dc

    def _terrain(self, cell: Tuple[int, int]) -> Optional[TerrainKind]:
        """Terrain at cell, or None beyond the edge."""
        if not self._in_bounds(*cell):
            return None
        return TerrainKind(int(self.grid[cell]))

    def step(self, action: Action) -> Observation:
        """
        Apply one action and return the resulting observation.

        Actions that the rules refuse leave the island unchanged.
        """
        if self.done:
            return self._make_observation()

        self.turns += 1
        action = Action(action)
        ahead = self._ahead()
        front = self._terrain(ahead)

        if action == Action.TURN_LEFT:
            self.direction = self.direction.counter_clockwise()
        elif action == Action.TURN_RIGHT:
            self.direction = self.direction.clockwise()
        elif action == Action.MOVE_FORWARD:
            self._move_forward(ahead, front)
        elif action == Action.CHOP_TREE:
            if front == TerrainKind.TREE and self.have_axe:
                self.grid[ahead] = int(TerrainKind.PLAIN)
                self.have_raft = True
        elif action == Action.UNLOCK_DOOR:
            if front == TerrainKind.DOOR and self.have_key:
                self.grid[ahead] = int(TerrainKind.PLAIN)
        elif action == Action.USE_DYNAMITE:
            if front in BLOWABLE and self.dynamite_count > 0:
                self.grid[ahead] = int(TerrainKind.PLAIN)
                self.dynamite_count -= 1

        if self.turns >= self.config.max_turns:
            self.done = True
        return self._make_observation()

    def _move_forward(self, ahead: Tuple[int, int],
                      front: Optional[TerrainKind]) -> None:
        if front is None or front in (TerrainKind.WALL, TerrainKind.DOOR,
                                      TerrainKind.TREE):
            return

        if front == TerrainKind.WATER:
            if not self.have_raft:
                self.position = ahead
                self.drowned = True
                self.done = True
                return
            self.on_water = True
        elif self.on_water:
            self.on_water = False
            self.have_raft = False

        if front == TerrainKind.AXE:
            self.have_axe = True
        elif front == TerrainKind.KEY:
            self.have_key = True
        elif front == TerrainKind.DYNAMITE:
            self.dynamite_count += 1
        elif front == TerrainKind.TREASURE:
            self.have_treasure = True
        if can_move_onto(front):
            self.grid[ahead] = int(TerrainKind.PLAIN)

        self.position = ahead
        if self.have_treasure and self.position == self.start:
            self.won = True
            self.done = True

    def view(self) -> List[str]:
        """The window around the agent, rotated so the agent faces up."""
        size = self.config.window_size
        radius = size // 2
        r0, c0 = self.position
        window = np.full((size, size), EDGE_SYMBOL, dtype="<U1")
        for i in range(size):
            for j in range(size):
                kind = self._terrain((r0 + i - radius, c0 + j - radius))
                if kind is not None:
                    window[i, j] = kind.symbol
        window[radius, radius] = "^"
        egocentric = np.rot90(window, int(self.direction))
        return ["".join(row) for row in egocentric]

    def _make_observation(self) -> Observation:
        return Observation(
            view=self.view(),
            done=self.done,
            won=self.won,
            turn=self.turns,
        )

    def render(self) -> str:
        """ASCII rendering of the island for debugging."""
        markers = {d: s for s, d in AGENT_SYMBOLS.items()}
        lines = []
        for r in range(self.grid.shape[0]):
            row_str = ""
            for c in range(self.grid.shape[1]):
                if (r, c) == self.position:
                    row_str += markers[self.direction]
                else:
                    row_str += TerrainKind(int(self.grid[r, c])).symbol
            lines.append(row_str)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Pre-built islands of increasing difficulty
# ---------------------------------------------------------------------------

def make_corridor_island() -> Island:
    """
    Level 1: a walled corridor with the treasure at the far end.

        ***
        *$*
        * *
        * *
        * *
        * *
        *^*
        ***
    """
    return Island(IslandConfig(layout=[
        "***",
        "*$*",
        "* *",
        "* *",
        "* *",
        "* *",
        "*^*",
        "***",
    ]))


def make_key_door_island() -> Island:
    """
    Level 2: the treasure sits behind a locked door, the key lies nearby.

        *******
        *k    *
        * *** *
        * *$* *
        * *-* *
        *  ^  *
        *******
    """
    return Island(IslandConfig(layout=[
        "*******",
        "*k    *",
        "* *** *",
        "* *$* *",
        "* *-* *",
        "*  ^  *",
        "*******",
    ]))


def make_lake_island() -> Island:
    """
    Level 3: the treasure is across a lake. An axe and a tree make a raft
    to cross; a second tree on the far shore makes the raft home.

        *************
        *a  T  ~~~ T*
        *      ~~~ $*
        *  ^   ~~~  *
        *************
    """
    return Island(IslandConfig(layout=[
        "*************",
        "*a  T  ~~~ T*",
        "*      ~~~ $*",
        "*  ^   ~~~  *",
        "*************",
    ]))


def make_fortress_island() -> Island:
    """
    Level 4: the treasure is walled in; dynamite lies outside.

        *********
        *d      *
        *  ***  *
        *  *$*  *
        *  ***  *
        *   ^   *
        *********
    """
    return Island(IslandConfig(layout=[
        "*********",
        "*d      *",
        "*  ***  *",
        "*  *$*  *",
        "*  ***  *",
        "*   ^   *",
        "*********",
    ]))
