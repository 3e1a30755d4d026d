"""
Hunt demo: the agent plays each prebuilt island in turn.

The agent starts with no map. Each turn it sees a 5x5 window, merges it
into its world model and picks one action:
- Walk the corridor and bring the treasure home
- Fetch a key and unlock the door in front of the treasure
- Fetch an axe, chop a tree and raft across a lake
- Pick up dynamite and blast into a walled vault
"""

from treasure_hunter import HuntConfig, TreasureHunter
from treasure_hunter.worlds import (
    make_corridor_island, make_key_door_island,
    make_lake_island, make_fortress_island,
)


def main():
    print("=" * 60)
    print("  Treasure Hunter — Island Demo")
    print("=" * 60)

    levels = [
        ("Level 1: Corridor", make_corridor_island),
        ("Level 2: Key and Door", make_key_door_island),
        ("Level 3: Lake", make_lake_island),
        ("Level 4: Fortress", make_fortress_island),
    ]
    hunter = TreasureHunter(HuntConfig(report_every=10))

    for title, make_island in levels:
        print(f"\n--- {title} ---\n")
        island = make_island()
        print("Island:")
        print(island.render())
        print()

        result = hunter.hunt(island, verbose=True)
        print()
        print(result.summary())
        print(f"  Actions: {result.action_string}")
        print()
        print(result.world_model.summary())


if __name__ == "__main__":
    main()
