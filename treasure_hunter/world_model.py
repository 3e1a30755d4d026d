"""
World model — reconstructs the island from successive 5x5 views.

The agent never learns its absolute position or true starting facing.
It builds its own frame instead: the starting cell is the origin (0, 0)
and the starting facing is whatever ModelConfig.initial_direction says.
Every view arrives egocentric (the agent facing the top row), so it is
rotated into this frame before being merged:

    facing UP    → no rotation
    facing RIGHT → one clockwise quarter-turn
    facing DOWN  → two quarter-turns
    facing LEFT  → three quarter-turns

Besides the map, the model keeps:
- The agent's pose, the terrain under its feet and its inventory
- Discovery queues of tools and obstacles seen but not yet dealt with,
  each target paired with the cell it was first seen from
- The last treasure sighting

The model is the only component that mutates this state. update() merges
an observation, update_move() applies the consequences of an action.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from treasure_hunter.grid import TerrainGrid
from treasure_hunter.pathfinder import Pathfinder
from treasure_hunter.terrain import (
    COLLECTIBLES,
    Action,
    Coordinate,
    Direction,
    TerrainKind,
    can_be_blown_up,
    can_move_onto,
    can_potentially_move_onto,
    manhattan,
    passable_kinds,
    step,
)

logger = logging.getLogger(__name__)

ORIGIN: Coordinate = (0, 0)


@dataclass
class ModelConfig:
    """Configuration for the world model."""
    max_x: int = 80                 # Map spans [-max_x..max_x]
    max_y: int = 80                 # Map spans [-max_y..max_y]
    window_size: int = 5            # Side of the square view
    initial_direction: Direction = Direction.UP

    def __post_init__(self):
        if self.window_size <= 0 or self.window_size % 2 == 0:
            raise ValueError(
                f"window_size must be a positive odd number, got {self.window_size}"
            )


@dataclass
class DiscoveryQueue:
    """
    Targets seen but not yet resolved, in order of first sighting.

    seen_from[i] is where the agent stood when targets[i] was first seen,
    or None once that sighting has been revisited.
    """
    targets: List[Coordinate] = field(default_factory=list)
    seen_from: List[Optional[Coordinate]] = field(default_factory=list)

    def add(self, target: Coordinate, seen_from: Coordinate) -> bool:
        if target in self.targets:
            return False
        self.targets.append(target)
        self.seen_from.append(seen_from)
        return True

    def peek(self) -> Optional[Coordinate]:
        return self.targets[0] if self.targets else None

    def pop(self) -> Coordinate:
        self.seen_from.pop(0)
        return self.targets.pop(0)

    def remove(self, target: Coordinate) -> bool:
        if target not in self.targets:
            return False
        i = self.targets.index(target)
        del self.targets[i]
        del self.seen_from[i]
        return True

    def seen_from_of(self, target: Coordinate) -> Optional[Coordinate]:
        if target not in self.targets:
            return None
        return self.seen_from[self.targets.index(target)]

    def forget_seen_from(self, target: Coordinate) -> None:
        if target in self.targets:
            self.seen_from[self.targets.index(target)] = None

    def __contains__(self, target: Coordinate) -> bool:
        return target in self.targets

    def __len__(self) -> int:
        return len(self.targets)

    def __iter__(self):
        return iter(self.targets)


class WorldModel:
    """
    The agent's knowledge of the island and of itself.

    Pathfinding always runs over terrain_snapshot(), a read-only view of
    the map, so searches can never mutate model state.
    """

    def __init__(self, config: Optional[ModelConfig] = None):
        self.config = config or ModelConfig()
        self.terrain = TerrainGrid(self.config.max_x, self.config.max_y)
        self._visited = np.zeros(self.terrain.shape, dtype=bool)

        # Pose
        self.position: Coordinate = ORIGIN
        self.direction: Direction = self.config.initial_direction
        # The view shows the agent, not the ground, on its own cell
        self.current_terrain: TerrainKind = TerrainKind.PLAIN

        # Inventory
        self.have_axe = False
        self.have_key = False
        self.have_raft = False
        self.have_treasure = False
        self.dynamite_count = 0

        # Discovery queues
        self.axes = DiscoveryQueue()
        self.keys = DiscoveryQueue()
        self.dynamites = DiscoveryQueue()
        self.trees = DiscoveryQueue()
        self.doors = DiscoveryQueue()

        # Treasure sighting; visibility only lasts for one observation
        self.treasure_visible = False
        self.treasure_location: Optional[Coordinate] = None
        self.treasure_seen_from: Optional[Coordinate] = None

        self.mark_visited(self.position)

    def _queue_for(self, kind: TerrainKind) -> DiscoveryQueue:
        return {
            TerrainKind.AXE: self.axes,
            TerrainKind.KEY: self.keys,
            TerrainKind.DYNAMITE: self.dynamites,
            TerrainKind.TREE: self.trees,
            TerrainKind.DOOR: self.doors,
        }[kind]

    # -----------------------------------------------------------------------
    # Observation merge
    # -----------------------------------------------------------------------

    def update(self, view: Sequence[Sequence[str]],
               facing: Optional[Direction] = None) -> None:
        """
        Merge one egocentric view into the map.

        view is window_size rows of terrain symbols with the agent at the
        centre, facing the top row. facing defaults to the model's own
        tracked direction.
        """
        if facing is None:
            facing = self.direction
        size = self.config.window_size
        symbols = np.array([list(row) for row in view])
        if symbols.shape != (size, size):
            raise ValueError(
                f"Expected a {size}x{size} view, got shape {symbols.shape}"
            )
        # np.rot90 turns counter-clockwise for positive k
        world_aligned = np.rot90(symbols, -int(facing))

        self.treasure_visible = False
        radius = size // 2
        x0, y0 = self.position

        for i in range(size):
            for j in range(size):
                kind = TerrainKind.from_symbol(str(world_aligned[i, j]))
                if kind is None:
                    continue  # agent marker
                tile = (x0 + (j - radius), y0 + (radius - i))
                if not self.terrain.in_bounds(tile):
                    continue
                self.terrain[tile] = kind

                if kind in COLLECTIBLES:
                    if self._queue_for(kind).add(tile, self.position):
                        logger.debug("Discovered %s at %s from %s",
                                     kind.name, tile, self.position)
                elif kind == TerrainKind.TREASURE:
                    self.treasure_visible = True
                    self.treasure_location = tile
                    self.treasure_seen_from = self.position

        self.mark_visited(self.position)
        self.terrain[self.position] = self.current_terrain

    # -----------------------------------------------------------------------
    # Action consequences
    # -----------------------------------------------------------------------

    def front_coordinate(self) -> Coordinate:
        return step(self.position, self.direction)

    def update_move(self, action: Action) -> None:
        """Apply the consequences of an action about to be sent."""
        ahead = self.front_coordinate()
        front = self.terrain[ahead]

        if action == Action.TURN_RIGHT:
            self.direction = self.direction.clockwise()
        elif action == Action.TURN_LEFT:
            self.direction = self.direction.counter_clockwise()
        elif action == Action.MOVE_FORWARD:
            self._move_forward(ahead, front)
        elif action == Action.CHOP_TREE:
            if front == TerrainKind.TREE:
                self.trees.remove(ahead)
                self.terrain[ahead] = TerrainKind.PLAIN
                self.have_raft = True
                logger.debug("Felled tree at %s, raft ready", ahead)
        elif action == Action.UNLOCK_DOOR:
            if front == TerrainKind.DOOR:
                self.doors.remove(ahead)
                self.terrain[ahead] = TerrainKind.PLAIN
        elif action == Action.USE_DYNAMITE:
            if front in (TerrainKind.TREE, TerrainKind.DOOR):
                self._queue_for(front).remove(ahead)
            self.terrain[ahead] = TerrainKind.PLAIN
            self.dynamite_count -= 1
            logger.debug("Blasted %s at %s, %d dynamite left",
                         front.name, ahead, self.dynamite_count)

    def _move_forward(self, ahead: Coordinate, front: TerrainKind) -> None:
        if front in (TerrainKind.WALL, TerrainKind.DOOR, TerrainKind.TREE):
            return
        if self.current_terrain == TerrainKind.WATER and can_move_onto(front):
            self.have_raft = False

        if front == TerrainKind.AXE:
            self.have_axe = True
        elif front == TerrainKind.KEY:
            self.have_key = True
        elif front == TerrainKind.DYNAMITE:
            self.dynamite_count += 1
        elif front == TerrainKind.TREASURE:
            self.have_treasure = True

        if front in (TerrainKind.AXE, TerrainKind.KEY, TerrainKind.DYNAMITE):
            self._queue_for(front).remove(ahead)
        if front in (TerrainKind.AXE, TerrainKind.KEY,
                     TerrainKind.DYNAMITE, TerrainKind.TREASURE):
            self.terrain[ahead] = TerrainKind.PLAIN
            logger.debug("Picked up %s at %s", front.name, ahead)

        self.position = ahead
        self.current_terrain = self.terrain[ahead]
        self.mark_visited(ahead)

    # -----------------------------------------------------------------------
    # Queries
    # -----------------------------------------------------------------------

    def terrain_at(self, coord: Coordinate) -> TerrainKind:
        return self.terrain[coord]

    def terrain_snapshot(self) -> TerrainGrid:
        return self.terrain.read_only()

    def mark_visited(self, coord: Coordinate) -> None:
        if self.terrain.in_bounds(coord):
            self._visited[self.terrain.index(coord)] = True

    def has_visited(self, coord: Coordinate) -> bool:
        if not self.terrain.in_bounds(coord):
            return False
        return bool(self._visited[self.terrain.index(coord)])

    def is_reachable(self, start: Coordinate, goal: Coordinate) -> bool:
        finder = Pathfinder(self.terrain_snapshot(), start, goal)
        return finder.search(self.have_axe, self.have_key, self.have_raft)

    def _nearest_reachable(self, origin: Coordinate,
                           target_mask: np.ndarray) -> Optional[Coordinate]:
        """
        Closest unvisited known cell in target_mask that has a route.

        Candidates are tried in Manhattan order from origin.
        """
        mask = target_mask & self.terrain.known_mask() & ~self._visited
        candidates = self.terrain.coordinates_where(mask)
        candidates.sort(key=lambda c: (manhattan(origin, c), c))
        for candidate in candidates:
            if self.is_reachable(origin, candidate):
                return candidate
        return None

    def nearest_reachable_revealing_tile(self, origin: Coordinate) -> Optional[Coordinate]:
        """Exploration frontier: unvisited cells enterable with current tools."""
        kinds = passable_kinds(self.have_axe, self.have_key, self.have_raft)
        return self._nearest_reachable(origin, self.terrain.kind_mask(kinds))

    def nearest_reachable_revealing_water_tile(self, origin: Coordinate) -> Optional[Coordinate]:
        """Water frontier: unvisited water cells, whatever the tools."""
        return self._nearest_reachable(
            origin, self.terrain.kind_mask([TerrainKind.WATER])
        )

    def nearest_point_least_obstacles_surrounding(self, target: Coordinate) -> Optional[Coordinate]:
        """
        Best cell to blast toward target from.

        Walks outward from target in each direction over the run of
        blowable cells next to it, and returns the first cell past the
        shortest run. That cell must be one the agent can reach from where
        it stands with its current tools. Ties go to the earlier direction
        in clockwise order from UP. None if no direction ends on a
        reachable cell.
        """
        best: Optional[Coordinate] = None
        best_run = None
        for direction in Direction.all():
            cursor = step(target, direction)
            run = 0
            while can_be_blown_up(self.terrain[cursor]):
                run += 1
                cursor = step(cursor, direction)
            if not can_potentially_move_onto(self.terrain[cursor], self.have_axe,
                                             self.have_key, self.have_raft):
                continue
            if best_run is not None and run >= best_run:
                continue
            if not self.is_reachable(self.position, cursor):
                continue
            best, best_run = cursor, run
        return best

    def visited_count(self) -> int:
        return int(np.count_nonzero(self._visited))

    def inventory(self) -> Dict[str, object]:
        return {
            "axe": self.have_axe,
            "key": self.have_key,
            "raft": self.have_raft,
            "treasure": self.have_treasure,
            "dynamite": self.dynamite_count,
        }

    def summary(self) -> str:
        """Human-readable summary of the model state."""
        held = [name for name, value in self.inventory().items()
                if value and name != "dynamite"]
        known = int(np.count_nonzero(self.terrain.known_mask()))
        lines = [
            "═" * 50,
            "  World Model Summary",
            "═" * 50,
            f"  Position:          {self.position} facing {self.direction.name}",
            f"  Standing on:       {self.current_terrain.name}",
            f"  Cells known:       {known}",
            f"  Walls known:       {self.terrain.count(TerrainKind.WALL)}",
            f"  Water known:       {self.terrain.count(TerrainKind.WATER)}",
            f"  Cells visited:     {self.visited_count()}",
            f"  Holding:           {', '.join(held) or 'nothing'}",
            f"  Dynamite:          {self.dynamite_count}",
            f"  Treasure at:       {self.treasure_location or 'unknown'}",
            "",
            f"  Queued axes:       {len(self.axes)}",
            f"  Queued keys:       {len(self.keys)}",
            f"  Queued dynamite:   {len(self.dynamites)}",
            f"  Queued trees:      {len(self.trees)}",
            f"  Queued doors:      {len(self.doors)}",
            "═" * 50,
        ]
        return "\n".join(lines)
