"""
Episode runner — plays a DecisionEngine against an island.

The loop mirrors the game protocol:

    view → decide → step → view ...

It ends when the island reports the episode over (treasure home, agent
drowned, island turn limit), when the hunter's own turn budget runs out,
or when the engine is stranded with nothing left to try.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from treasure_hunter.decision import DecisionEngine, NoViableActionError
from treasure_hunter.terrain import Action
from treasure_hunter.world_model import ModelConfig, WorldModel
from treasure_hunter.worlds.island import Island

logger = logging.getLogger(__name__)


@dataclass
class HuntConfig:
    """Configuration for the hunter."""
    max_turns: int = 2000           # Turn budget per episode
    report_every: int = 50          # Verbose progress interval
    model: ModelConfig = field(default_factory=ModelConfig)


@dataclass
class HuntResult:
    """Result of one treasure hunt."""
    won: bool
    drowned: bool
    stuck: bool
    turns: int
    actions: List[Action]
    world_model: WorldModel

    @property
    def action_string(self) -> str:
        return "".join(a.value for a in self.actions)

    def summary(self) -> str:
        if self.won:
            outcome = "Treasure brought home"
        elif self.drowned:
            outcome = "Drowned"
        elif self.stuck:
            outcome = "Stranded"
        else:
            outcome = "Out of turns"
        model = self.world_model
        lines = [
            "═" * 55,
            "  Treasure Hunter — Hunt Result",
            "═" * 55,
            f"  Outcome:           {outcome}",
            f"  Turns:             {self.turns}",
            f"  Forward moves:     {self.actions.count(Action.MOVE_FORWARD)}",
            f"  Turns on the spot: "
            f"{self.actions.count(Action.TURN_LEFT) + self.actions.count(Action.TURN_RIGHT)}",
            f"  Trees chopped:     {self.actions.count(Action.CHOP_TREE)}",
            f"  Doors unlocked:    {self.actions.count(Action.UNLOCK_DOOR)}",
            f"  Dynamite used:     {self.actions.count(Action.USE_DYNAMITE)}",
            f"  Cells visited:     {model.visited_count()}",
            "═" * 55,
        ]
        return "\n".join(lines)


class TreasureHunter:
    """
    Drives a fresh DecisionEngine through one episode per hunt() call.
    """

    def __init__(self, config: Optional[HuntConfig] = None):
        self.config = config or HuntConfig()
        self.engine: Optional[DecisionEngine] = None

    def hunt(self, island: Island, verbose: bool = False) -> HuntResult:
        obs = island.reset()
        self.engine = DecisionEngine(WorldModel(self.config.model))
        actions: List[Action] = []
        stuck = False

        while not obs.done and len(actions) < self.config.max_turns:
            try:
                action = self.engine.decide(obs.view)
            except NoViableActionError as exc:
                logger.warning("Hunt stranded after %d turns: %s",
                               len(actions), exc)
                stuck = True
                break
            actions.append(action)
            obs = island.step(action)

            if verbose and len(actions) % self.config.report_every == 0:
                model = self.engine.model
                print(
                    f"  [turn {len(actions):4d}] "
                    f"pos={model.position}  "
                    f"plan={self.engine.last_priority}  "
                    f"visited={model.visited_count():3d}  "
                    f"treasure={'✓' if model.have_treasure else '✗'}"
                )

        if verbose:
            status = "✓" if island.won else "✗"
            print(f"  {status} Hunt over after {len(actions)} turns.")

        return HuntResult(
            won=island.won,
            drowned=island.drowned,
            stuck=stuck,
            turns=len(actions),
            actions=actions,
            world_model=self.engine.model,
        )
