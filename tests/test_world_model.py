"""Tests for map reconstruction and action bookkeeping."""

import unittest

from treasure_hunter.terrain import SYMBOL_TERRAIN, Action, Direction, TerrainKind
from treasure_hunter.world_model import DiscoveryQueue, ModelConfig, WorldModel


def make_view(cells=None, size=5):
    """A plain view with the agent in the centre and given (row, col) symbols."""
    rows = [[" "] * size for _ in range(size)]
    rows[size // 2][size // 2] = "^"
    for (i, j), symbol in (cells or {}).items():
        rows[i][j] = symbol
    return ["".join(row) for row in rows]


def paint(model, layout, origin):
    """Write rows of symbols into the model map; '^' is plain, '?' skipped."""
    r0, c0 = origin
    for r, row in enumerate(layout):
        for c, symbol in enumerate(row):
            if symbol == "?":
                continue
            kind = TerrainKind.PLAIN if symbol == "^" else SYMBOL_TERRAIN[symbol]
            model.terrain[(c - c0, r0 - r)] = kind


class TestObservationMerge(unittest.TestCase):
    """Test how views land on the map."""

    def setUp(self):
        self.model = WorldModel()

    def test_initial_pose(self):
        self.assertEqual(self.model.position, (0, 0))
        self.assertEqual(self.model.direction, Direction.UP)
        self.assertEqual(self.model.current_terrain, TerrainKind.PLAIN)
        self.assertTrue(self.model.has_visited((0, 0)))
        self.assertEqual(self.model.dynamite_count, 0)

    def test_facing_up_places_cells(self):
        self.model.update([
            "  a  ",
            "     ",
            "  ^ $",
            "  *  ",
            "~   T",
        ])
        m = self.model
        self.assertEqual(m.terrain_at((0, 2)), TerrainKind.AXE)
        self.assertEqual(m.terrain_at((2, 0)), TerrainKind.TREASURE)
        self.assertEqual(m.terrain_at((0, -1)), TerrainKind.WALL)
        self.assertEqual(m.terrain_at((-2, -2)), TerrainKind.WATER)
        self.assertEqual(m.terrain_at((2, -2)), TerrainKind.TREE)
        self.assertEqual(m.terrain_at((0, 0)), TerrainKind.PLAIN)
        self.assertEqual(m.terrain_at((0, 3)), TerrainKind.UNEXPLORED)

    def test_discovery_queues(self):
        self.model.update(make_view({(0, 2): "a", (4, 4): "T", (1, 0): "-"}))
        self.assertEqual(list(self.model.axes), [(0, 2)])
        self.assertEqual(list(self.model.trees), [(2, -2)])
        self.assertEqual(list(self.model.doors), [(-2, 1)])
        self.assertEqual(self.model.axes.seen_from_of((0, 2)), (0, 0))

    def test_discovery_not_duplicated(self):
        view = make_view({(0, 2): "k"})
        self.model.update(view)
        self.model.update(view)
        self.assertEqual(len(self.model.keys), 1)

    def test_facing_right_rotates(self):
        self.model.direction = Direction.RIGHT
        self.model.update(make_view({(0, 2): "$", (2, 0): "d"}))
        self.assertEqual(self.model.terrain_at((2, 0)), TerrainKind.TREASURE)
        self.assertEqual(self.model.terrain_at((0, 2)), TerrainKind.DYNAMITE)

    def test_facing_down_rotates(self):
        self.model.direction = Direction.DOWN
        self.model.update(make_view({(0, 2): "*"}))
        self.assertEqual(self.model.terrain_at((0, -2)), TerrainKind.WALL)

    def test_explicit_facing_overrides(self):
        self.model.update(make_view({(0, 2): "*"}), facing=Direction.LEFT)
        self.assertEqual(self.model.terrain_at((-2, 0)), TerrainKind.WALL)

    def test_merging_same_view_twice_is_idempotent(self):
        view = make_view({(0, 0): "~", (1, 3): "T", (4, 2): "*"})
        self.model.update(view)
        before = self.model.terrain.copy()
        self.model.update(view)
        self.assertTrue((self.model.terrain.cells == before.cells).all())
        self.assertEqual(len(self.model.trees), 1)

    def test_treasure_visibility_resets(self):
        self.model.update(make_view({(0, 2): "$"}))
        self.assertTrue(self.model.treasure_visible)
        self.assertEqual(self.model.treasure_location, (0, 2))
        self.assertEqual(self.model.treasure_seen_from, (0, 0))

        self.model.update(make_view())
        self.assertFalse(self.model.treasure_visible)
        self.assertEqual(self.model.treasure_location, (0, 2),
                         "Last sighting should be remembered")

    def test_own_cell_uses_current_terrain(self):
        self.model.current_terrain = TerrainKind.WATER
        self.model.update(make_view())
        self.assertEqual(self.model.terrain_at((0, 0)), TerrainKind.WATER)

    def test_edge_symbol_is_wall(self):
        self.model.update(make_view({(0, 0): "."}))
        self.assertEqual(self.model.terrain_at((-2, 2)), TerrainKind.WALL)

    def test_rejects_wrong_shape(self):
        with self.assertRaises(ValueError):
            self.model.update(["   ", " ^ ", "   "])

    def test_rejects_unknown_symbol(self):
        with self.assertRaises(ValueError):
            self.model.update(make_view({(0, 0): "#"}))

    def test_cells_beyond_bound_ignored(self):
        model = WorldModel(ModelConfig(max_x=1, max_y=1))
        model.update(make_view({(0, 0): "*", (1, 1): "~"}))
        self.assertEqual(model.terrain_at((-1, 1)), TerrainKind.WATER)
        self.assertEqual(model.terrain_at((-2, 2)), TerrainKind.UNEXPLORED)

    def test_config_rejects_even_window(self):
        with self.assertRaises(ValueError):
            ModelConfig(window_size=4)


class TestActionConsequences(unittest.TestCase):
    """Test update_move bookkeeping."""

    def setUp(self):
        self.model = WorldModel()

    def test_turns(self):
        self.model.update_move(Action.TURN_RIGHT)
        self.assertEqual(self.model.direction, Direction.RIGHT)
        self.model.update_move(Action.TURN_LEFT)
        self.model.update_move(Action.TURN_LEFT)
        self.assertEqual(self.model.direction, Direction.LEFT)
        self.assertEqual(self.model.position, (0, 0))

    def test_forward_picks_up_axe(self):
        self.model.update(make_view({(1, 2): "a"}))
        self.model.update_move(Action.MOVE_FORWARD)
        m = self.model
        self.assertEqual(m.position, (0, 1))
        self.assertTrue(m.have_axe)
        self.assertEqual(len(m.axes), 0)
        self.assertEqual(m.terrain_at((0, 1)), TerrainKind.PLAIN)
        self.assertTrue(m.has_visited((0, 1)))

    def test_forward_counts_dynamite(self):
        self.model.update(make_view({(1, 2): "d", (0, 2): "d"}))
        self.model.update_move(Action.MOVE_FORWARD)
        self.model.update_move(Action.MOVE_FORWARD)
        self.assertEqual(self.model.dynamite_count, 2)
        self.assertEqual(len(self.model.dynamites), 0)

    def test_forward_picks_up_treasure(self):
        self.model.update(make_view({(1, 2): "$"}))
        self.model.update_move(Action.MOVE_FORWARD)
        self.assertTrue(self.model.have_treasure)
        self.assertEqual(self.model.terrain_at((0, 1)), TerrainKind.PLAIN)

    def test_forward_blocked(self):
        for symbol in "*-T":
            model = WorldModel()
            model.update(make_view({(1, 2): symbol}))
            model.update_move(Action.MOVE_FORWARD)
            self.assertEqual(model.position, (0, 0), f"Walked through {symbol!r}")

    def test_chop_tree_gives_raft(self):
        self.model.update(make_view({(1, 2): "T"}))
        self.model.update_move(Action.CHOP_TREE)
        self.assertTrue(self.model.have_raft)
        self.assertEqual(len(self.model.trees), 0)
        self.assertEqual(self.model.terrain_at((0, 1)), TerrainKind.PLAIN)

    def test_chop_without_tree_does_nothing(self):
        self.model.update(make_view())
        self.model.update_move(Action.CHOP_TREE)
        self.assertFalse(self.model.have_raft)

    def test_unlock_door(self):
        self.model.update(make_view({(1, 2): "-"}))
        self.model.update_move(Action.UNLOCK_DOOR)
        self.assertEqual(len(self.model.doors), 0)
        self.assertEqual(self.model.terrain_at((0, 1)), TerrainKind.PLAIN)

    def test_dynamite_clears_door(self):
        self.model.dynamite_count = 1
        self.model.update(make_view({(1, 2): "-"}))
        self.model.update_move(Action.USE_DYNAMITE)
        self.assertEqual(self.model.dynamite_count, 0)
        self.assertEqual(len(self.model.doors), 0)
        self.assertEqual(self.model.terrain_at((0, 1)), TerrainKind.PLAIN)

    def test_raft_lost_stepping_ashore(self):
        m = self.model
        m.have_raft = True
        m.current_terrain = TerrainKind.WATER
        m.update(make_view({(1, 2): " "}))
        m.update_move(Action.MOVE_FORWARD)
        self.assertFalse(m.have_raft)
        self.assertEqual(m.current_terrain, TerrainKind.PLAIN)

    def test_raft_kept_on_water(self):
        m = self.model
        m.have_raft = True
        m.current_terrain = TerrainKind.WATER
        m.update(make_view({(1, 2): "~"}))
        m.update_move(Action.MOVE_FORWARD)
        self.assertTrue(m.have_raft)
        self.assertEqual(m.current_terrain, TerrainKind.WATER)


class TestQueries(unittest.TestCase):
    """Test frontier and blast-point queries."""

    def setUp(self):
        self.model = WorldModel()

    def test_nearest_revealing_tile(self):
        self.model.update(make_view({(3, 2): "*"}))
        # Ties at distance one break on the coordinate
        self.assertEqual(self.model.nearest_reachable_revealing_tile((0, 0)),
                         (-1, 0))

    def test_revealing_tile_skips_unreachable(self):
        paint(self.model, ["*****", "* * *", "*****"], origin=(1, 1))
        self.assertEqual(self.model.nearest_reachable_revealing_tile((0, 0)),
                         None)

    def test_revealing_water_tile(self):
        self.model.have_raft = True
        paint(self.model, ["*****", "*^~~*", "*****"], origin=(1, 1))
        self.assertEqual(
            self.model.nearest_reachable_revealing_water_tile((0, 0)), (1, 0)
        )

    def test_water_tile_needs_raft(self):
        paint(self.model, ["*****", "*^~~*", "*****"], origin=(1, 1))
        self.assertIsNone(
            self.model.nearest_reachable_revealing_water_tile((0, 0))
        )

    def test_least_obstacles_prefers_open_side(self):
        paint(self.model, [
            "     ",
            " *** ",
            " *$  ",
            " *** ",
            "     ",
        ], origin=(2, 2))
        self.assertEqual(
            self.model.nearest_point_least_obstacles_surrounding((0, 0)), (1, 0)
        )

    def test_least_obstacles_skips_unknown_ends(self):
        paint(self.model, [
            "*****",
            "**$**",
            "*****",
            "**^**",
            "*****",
        ], origin=(3, 2))
        self.assertEqual(
            self.model.nearest_point_least_obstacles_surrounding((0, 2)), (0, 0)
        )

    def test_least_obstacles_needs_reachable_side(self):
        paint(self.model, [
            "*********",
            "* *$** ^*",
            "*********",
        ], origin=(1, 7))
        self.assertEqual(
            self.model.nearest_point_least_obstacles_surrounding((-4, 0)),
            (-1, 0),
            "A shorter run ending in a sealed pocket must be passed over",
        )

    def test_least_obstacles_none(self):
        paint(self.model, ["***", "*$*", "***"], origin=(1, 1))
        self.assertIsNone(
            self.model.nearest_point_least_obstacles_surrounding((0, 0))
        )

    def test_is_reachable_uses_tools(self):
        paint(self.model, ["*$*", "*-*", "*^*", "***"], origin=(2, 1))
        self.assertFalse(self.model.is_reachable((0, 0), (0, 2)))
        self.model.have_key = True
        self.assertTrue(self.model.is_reachable((0, 0), (0, 2)))

    def test_summary(self):
        self.model.update(make_view({(0, 2): "$"}))
        text = self.model.summary()
        self.assertIn("World Model Summary", text)
        self.assertIn("(0, 2)", text)
        self.assertIn("Walls known:       0", text)
        self.assertEqual(self.model.inventory()["dynamite"], 0)


class TestDiscoveryQueue(unittest.TestCase):

    def test_order_and_removal(self):
        q = DiscoveryQueue()
        self.assertTrue(q.add((1, 1), (0, 0)))
        self.assertTrue(q.add((2, 2), (0, 1)))
        self.assertFalse(q.add((1, 1), (5, 5)))
        self.assertEqual(q.peek(), (1, 1))
        self.assertTrue(q.remove((1, 1)))
        self.assertFalse(q.remove((1, 1)))
        self.assertEqual(q.seen_from_of((2, 2)), (0, 1))
        self.assertEqual(q.pop(), (2, 2))
        self.assertIsNone(q.peek())
        self.assertNotIn((2, 2), q)

    def test_forget_seen_from(self):
        q = DiscoveryQueue()
        q.add((3, 3), (1, 0))
        q.forget_seen_from((3, 3))
        self.assertIn((3, 3), q)
        self.assertIsNone(q.seen_from_of((3, 3)))


if __name__ == "__main__":
    unittest.main()
