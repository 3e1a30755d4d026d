"""
Quick start example for Treasure Hunter.

Demonstrates the core workflow:
1. Describe an island as rows of terrain symbols
2. Let the TreasureHunter play it through the view/step protocol
3. Inspect the result and the map the agent built
"""

import logging

from treasure_hunter import TreasureHunter
from treasure_hunter.worlds import Island


ISLAND = """
**********
*   k    *
* ****** *
* *$   - *
* ****** *
*   ^    *
**********
"""


def main():
    # Debug logs show every plan the decision engine commits to
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    island = Island.from_text(ISLAND)
    print("Treasure Hunter — Quick Start")
    print("=" * 50)
    print(island.render())
    print()

    result = TreasureHunter().hunt(island, verbose=True)

    print()
    print(result.summary())
    print(f"\n  Actions: {result.action_string}")
    print(f"  Inventory at the end: {result.world_model.inventory()}")


if __name__ == "__main__":
    main()
