"""
Two-phase A* search over the agent's partial map.

Movement is 4-connected with unit step cost, so Manhattan distance is an
admissible and consistent heuristic.

The search is tool-gated and deliberately reluctant to fell trees:
1. Phase 1 plans as if no axe were held, so trees block the route.
2. Only if phase 1 finds nothing, and an axe is held, phase 2 repeats the
   search with trees passable.

Chopping a tree is irreversible and hands the agent a raft, which changes
what it can reach later, so a tree-free route is always preferred.

If both endpoints are water, the route must stay on water. This keeps a
rafting agent from being routed over land it cannot get back from once
the raft is lost on stepping ashore.
"""

from __future__ import annotations

import heapq
import logging
from typing import Dict, List, Optional, Set, Tuple

from treasure_hunter.grid import TerrainGrid
from treasure_hunter.terrain import (
    Coordinate,
    Direction,
    TerrainKind,
    can_potentially_move_onto,
    manhattan,
    step,
)

logger = logging.getLogger(__name__)


class Pathfinder:
    """
    Single-goal shortest path search.

    A Pathfinder is built for one (start, goal) pair over a read-only map
    snapshot; call search() once, then query reachable() and
    reconstruct_path(). Search state is discarded with the instance.
    """

    def __init__(self, terrain: TerrainGrid, start: Coordinate,
                 goal: Coordinate):
        self.terrain = terrain
        self.start = start
        self.goal = goal
        self.g_score: Dict[Coordinate, int] = {}
        self.f_score: Dict[Coordinate, int] = {}
        self.came_from: Dict[Coordinate, Coordinate] = {}
        self.phase: Optional[int] = None
        self._found = False

    def search(self, have_axe: bool = False, have_key: bool = False,
               have_raft: bool = False) -> bool:
        """
        Run phase 1 and, if needed, phase 2. Returns reachable().
        """
        allow_trees = False
        while True:
            self.phase = 2 if allow_trees else 1
            if self._run(allow_trees, have_key, have_raft):
                return True
            if allow_trees or not have_axe:
                return False
            logger.debug("No tree-free route %s -> %s, retrying with axe",
                         self.start, self.goal)
            allow_trees = True

    def _run(self, allow_trees: bool, have_key: bool,
             have_raft: bool) -> bool:
        """One A* pass. Leaves came_from populated for reconstruction."""
        self.g_score = {self.start: 0}
        self.f_score = {self.start: manhattan(self.start, self.goal)}
        self.came_from = {}
        self._found = False

        water_only = (self.terrain[self.start] == TerrainKind.WATER and
                      self.terrain[self.goal] == TerrainKind.WATER)

        frontier: List[Tuple[int, Coordinate]] = [
            (self.f_score[self.start], self.start)
        ]
        expanded: Set[Coordinate] = set()

        while frontier:
            _, current = heapq.heappop(frontier)
            if current in expanded:
                continue  # stale entry
            if current == self.goal:
                self._found = True
                return True
            expanded.add(current)

            for direction in Direction.all():
                neighbor = step(current, direction)
                if neighbor in expanded:
                    continue
                kind = self.terrain[neighbor]
                if water_only and kind != TerrainKind.WATER:
                    continue
                if not can_potentially_move_onto(kind, allow_trees,
                                                 have_key, have_raft):
                    continue
                tentative = self.g_score[current] + 1
                if tentative >= self.g_score.get(neighbor, float("inf")):
                    continue
                self.came_from[neighbor] = current
                self.g_score[neighbor] = tentative
                self.f_score[neighbor] = tentative + manhattan(neighbor, self.goal)
                heapq.heappush(frontier, (self.f_score[neighbor], neighbor))

        return False

    def reachable(self) -> bool:
        return self._found

    def reconstruct_path(self, include_start: bool = False) -> List[Coordinate]:
        """
        Coordinates from start to goal, walking predecessor links back.

        The start is omitted unless include_start is set. Empty when the
        goal is unreachable.
        """
        if not self._found:
            return []
        path = []
        current = self.goal
        while current != self.start:
            path.append(current)
            current = self.came_from[current]
        if include_start:
            path.append(self.start)
        path.reverse()
        return path
