"""
Decision engine — turns world model state into one action per turn.

Each turn the engine merges the latest view into the world model. If the
action queue is empty it walks a fixed priority list and takes the first
entry that manages to queue actions:

1. Holding the treasure: head back to the origin
2. Treasure in view: go and pick it up
3. Afloat: finish exploring the water, rafts are scarce
4. Holding a key and a door is known: unlock it
5. Fetch a missing axe, a missing key, then any dynamite
6. Explore the nearest reachable unvisited cell
7. No raft: walk up to a known tree and chop it
8. Holding a raft: head out onto unexplored water
9. No axe and a queued axe out of reach: walk back to where it was seen
10. Blast a way toward the treasure with dynamite

Routes come from the two-phase Pathfinder and are compiled into turns,
door unlocks, tree chops and forward steps. The queue is drained one
action per turn before anything is re-planned.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence, Tuple

from treasure_hunter.pathfinder import Pathfinder
from treasure_hunter.terrain import (
    Action,
    Coordinate,
    Direction,
    TerrainKind,
    can_be_blown_up,
    step,
)
from treasure_hunter.world_model import ORIGIN, WorldModel

logger = logging.getLogger(__name__)


class NoViableActionError(RuntimeError):
    """Raised when no priority can produce an action."""


def turn_moves(current: Direction, target: Direction) -> List[Action]:
    """
    Fewest turns taking current facing to target facing.

    Three clockwise quarter-turns are done as one counter-clockwise turn;
    a reversal takes two right turns.
    """
    offset = (int(target) - int(current)) % 4
    if offset == 3:
        return [Action.TURN_LEFT]
    return [Action.TURN_RIGHT] * offset


class DecisionEngine:
    """
    Priority-ordered planner over a WorldModel.

    The engine owns the action queue. It reads the model freely, and pops
    discovery queues when it commits to a target.
    """

    def __init__(self, model: Optional[WorldModel] = None):
        self.model = model or WorldModel()
        self.action_queue: Deque[Action] = deque()
        self.last_priority: Optional[str] = None

    def decide(self, view: Sequence[Sequence[str]]) -> Action:
        """Merge a view, plan if needed, and return the next action."""
        self.model.update(view)
        if not self.action_queue:
            self._plan()
        action = self.action_queue.popleft()
        self.model.update_move(action)
        return action

    def _priorities(self) -> List[Tuple[str, Callable[[], bool]]]:
        return [
            ("return_treasure", self._return_treasure),
            ("fetch_treasure", self._fetch_treasure),
            ("explore_water_afloat", self._explore_water_afloat),
            ("unlock_door", self._unlock_door),
            ("collect_tools", self._collect_tools),
            ("explore_land", self._explore_land),
            ("chop_tree", self._chop_tree),
            ("launch_raft", self._launch_raft),
            ("revisit_axe_sighting", self._revisit_axe_sighting),
            ("blast_toward_treasure", self._blast_toward_treasure),
        ]

    def _plan(self) -> None:
        for name, priority in self._priorities():
            # A route of length zero queues nothing and does not count
            if priority() and self.action_queue:
                self.last_priority = name
                logger.debug("Turn plan from %s at %s: %s", name,
                             self.model.position,
                             "".join(a.value for a in self.action_queue))
                return
            self.action_queue.clear()
        raise NoViableActionError(
            f"No priority produced an action at {self.model.position} "
            f"facing {self.model.direction.name}"
        )

    # -----------------------------------------------------------------------
    # Route compilation
    # -----------------------------------------------------------------------

    def create_path_to(self, start: Coordinate, goal: Coordinate,
                       enter_goal: bool = True) -> bool:
        """
        Queue the actions that walk a shortest route from start to goal.

        Doors on the route are unlocked and trees chopped just before
        stepping onto them. With enter_goal unset, the agent stops next to
        the goal, facing it.
        """
        model = self.model
        finder = Pathfinder(model.terrain_snapshot(), start, goal)
        if not finder.search(model.have_axe, model.have_key, model.have_raft):
            return False

        path = finder.reconstruct_path(include_start=True)
        facing = model.direction
        for current, following in zip(path, path[1:]):
            heading = Direction.toward(current, following)
            self.action_queue.extend(turn_moves(facing, heading))
            facing = heading
            if following == goal and not enter_goal:
                break
            kind = model.terrain_at(following)
            if kind == TerrainKind.DOOR:
                self.action_queue.append(Action.UNLOCK_DOOR)
            elif kind == TerrainKind.TREE:
                self.action_queue.append(Action.CHOP_TREE)
            self.action_queue.append(Action.MOVE_FORWARD)
        return True

    # -----------------------------------------------------------------------
    # Priorities
    # -----------------------------------------------------------------------

    def _return_treasure(self) -> bool:
        if not self.model.have_treasure:
            return False
        return self.create_path_to(self.model.position, ORIGIN)

    def _fetch_treasure(self) -> bool:
        model = self.model
        if not model.treasure_visible or model.treasure_location is None:
            return False
        return self.create_path_to(model.position, model.treasure_location)

    def _explore_water_afloat(self) -> bool:
        model = self.model
        if model.current_terrain != TerrainKind.WATER:
            return False
        target = model.nearest_reachable_revealing_water_tile(model.position)
        if target is None:
            return False
        return self.create_path_to(model.position, target)

    def _unlock_door(self) -> bool:
        model = self.model
        if not model.have_key or not model.doors:
            return False
        if self.create_path_to(model.position, model.doors.peek()):
            model.doors.pop()
            return True
        return False

    def _collect_tools(self) -> bool:
        model = self.model
        wanted = []
        if not model.have_axe:
            wanted.append(model.axes)
        if not model.have_key:
            wanted.append(model.keys)
        wanted.append(model.dynamites)

        for queue in wanted:
            if not queue:
                continue
            if self.create_path_to(model.position, queue.peek()):
                queue.pop()
                return True
        return False

    def _explore_land(self) -> bool:
        model = self.model
        target = model.nearest_reachable_revealing_tile(model.position)
        if target is None:
            return False
        return self.create_path_to(model.position, target)

    def _chop_tree(self) -> bool:
        model = self.model
        if model.have_raft or not model.trees:
            return False
        if not self.create_path_to(model.position, model.trees.peek(),
                                   enter_goal=False):
            return False
        self.action_queue.append(Action.CHOP_TREE)
        return True

    def _launch_raft(self) -> bool:
        model = self.model
        if not model.have_raft:
            return False
        target = model.nearest_reachable_revealing_water_tile(model.position)
        if target is None:
            return False
        return self.create_path_to(model.position, target)

    def _revisit_axe_sighting(self) -> bool:
        """
        Walk back to where an unreachable axe was first seen.

        Each sighting is revisited once; the axe itself stays queued.
        """
        model = self.model
        if model.have_axe:
            return False
        for axe in model.axes:
            seen = model.axes.seen_from_of(axe)
            if seen is None:
                continue
            if self.create_path_to(model.position, seen):
                model.axes.forget_seen_from(axe)
                if self.action_queue:
                    return True
        return False

    def _blast_toward_treasure(self) -> bool:
        """
        Head for the last known treasure location, blasting if need be.

        A direct route is taken if one exists. Otherwise walk to the
        cheapest reachable side of the treasure; once standing there, turn
        to face it and use dynamite if the cell ahead is blowable.

        Nothing is done while the treasure has never been seen: there is
        no location to blast toward, and dynamite stays in hand.
        """
        model = self.model
        treasure = model.treasure_location
        if treasure is None:
            return False
        if self.create_path_to(model.position, treasure):
            return True
        stand = model.nearest_point_least_obstacles_surrounding(treasure)
        if stand is None:
            return False
        if stand != model.position:
            return self.create_path_to(model.position, stand)

        heading = Direction.toward(model.position, treasure)
        ahead = step(model.position, heading)
        if model.dynamite_count <= 0 or not can_be_blown_up(model.terrain_at(ahead)):
            return False
        self.action_queue.extend(turn_moves(model.direction, heading))
        self.action_queue.append(Action.USE_DYNAMITE)
        return True
