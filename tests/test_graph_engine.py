"""
Layout Engine Tests
===================

Tests for the force-directed layout engine:
1. Graph construction and validation
2. Numerical stability of the relaxation
3. Energy dynamics (boost / settle)
4. Pins and the drag state machine
"""

import itertools
import math

import pytest

from animvis.errors import ConfigurationError, TransientRenderSkip
from animvis.graph_engine import DEMO_LINKS, DEMO_NODES, GraphLayoutEngine, demo_graph


def make_engine(seed=1, width=600, height=400):
    return GraphLayoutEngine(DEMO_NODES, DEMO_LINKS, width, height, seed=seed)


def run(engine, steps):
    for _ in range(steps):
        engine.step()


class TestConstruction:

    def test_demo_graph_from_networkx(self):
        engine = GraphLayoutEngine.from_networkx(demo_graph(), 600, 400, seed=3)

        assert sorted(engine.nodes) == list("ABCDEFG")
        assert len(engine.links) == 8
        assert engine.nodes["C"].group == 2
        assert engine.degree["A"] == 3
        assert engine.degree["C"] == 3

    def test_links_resolve_to_node_records(self):
        engine = make_engine()
        link = engine.links[0]
        assert link.source is engine.nodes["A"]
        assert link.target is engine.nodes["B"]

    def test_link_bias_follows_degree(self):
        engine = make_engine()
        # A has three links, B has two
        assert engine.links[0].bias == pytest.approx(3 / 5)

    def test_dangling_link_rejected(self):
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine(DEMO_NODES, DEMO_LINKS + [("A", "Z")], 600, 400)

    def test_duplicate_node_rejected(self):
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine(DEMO_NODES + [{"id": "A", "group": 9}], DEMO_LINKS, 600, 400)

    def test_malformed_link_rejected(self):
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine(DEMO_NODES, [("A", "B", "C")], 600, 400)

    def test_node_link_mapping(self):
        data = {
            "nodes": [{"id": "x", "group": 1}, {"id": "y", "group": 2}],
            "links": [{"source": "x", "target": "y"}],
        }
        engine = GraphLayoutEngine.from_node_link(data, 300, 300)
        assert len(engine.links) == 1

    @pytest.mark.parametrize("data", [
        [],
        {"links": []},
        {"nodes": "A"},
        {"nodes": [{"group": 1}]},
        {"nodes": [{"id": "x"}], "links": {"source": "x"}},
    ])
    def test_malformed_node_link_rejected(self, data):
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine.from_node_link(data, 300, 300)

    @pytest.mark.parametrize("x", ["5", float("nan"), float("inf"), -float("inf"), True, [1]])
    def test_bad_seeded_coordinate_rejected(self, x):
        data = {"nodes": [{"id": "a", "x": x, "y": 1.0}, {"id": "b"}], "links": [["a", "b"]]}
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine.from_node_link(data, 300, 300)

    def test_integer_coordinates_accepted(self):
        engine = GraphLayoutEngine([{"id": "a", "x": 5, "y": 7}], [], 100, 100)
        assert engine.positions() == {"a": (5.0, 7.0)}

    @pytest.mark.parametrize("data", [
        {"nodes": [{"id": ["a"]}]},
        {"nodes": [{"id": {"k": 1}}]},
        {"nodes": [{"id": "a"}], "links": [{"source": ["a"], "target": "a"}]},
    ])
    def test_unhashable_keys_rejected(self, data):
        with pytest.raises(ConfigurationError):
            GraphLayoutEngine.from_node_link(data, 300, 300)

    def test_initial_jitter_around_center(self):
        engine = make_engine(seed=11)
        for node in engine.nodes.values():
            assert abs(node.x - 300) <= engine.jitter
            assert abs(node.y - 200) <= engine.jitter

    def test_seeded_positions_kept(self):
        engine = GraphLayoutEngine([{"id": "a", "x": 5.0, "y": 7.0}], [], 100, 100)
        assert engine.positions() == {"a": (5.0, 7.0)}

    def test_same_seed_same_trajectory(self):
        a, b = make_engine(seed=42), make_engine(seed=42)
        run(a, 50)
        run(b, 50)
        assert a.positions() == b.positions()


class TestStability:

    @pytest.mark.parametrize("seed", [0, 1729, 424242])
    def test_ten_thousand_steps_stay_finite(self, seed):
        engine = make_engine(seed=seed)
        for _ in range(10_000):
            positions = engine.step()
            for x, y in positions.values():
                assert math.isfinite(x) and math.isfinite(y)

    def test_coincident_nodes_are_separated(self):
        nodes = [{"id": k, "x": 50.0, "y": 50.0} for k in "abcd"]
        engine = GraphLayoutEngine(nodes, [("a", "b")], 100, 100, seed=5)
        run(engine, 100)

        positions = engine.positions()
        for x, y in positions.values():
            assert math.isfinite(x) and math.isfinite(y)
        for p, q in itertools.combinations(positions.values(), 2):
            assert math.dist(p, q) > 1

    def test_empty_graph_steps(self):
        engine = GraphLayoutEngine([], [], 100, 100)
        assert engine.step() == {}


class TestEnergy:

    def test_energy_decays_to_rest_and_goes_inactive(self):
        engine = make_engine()
        run(engine, 310)
        assert engine.is_settled
        assert engine.active is False

    def test_settle_decreases_strictly_and_converges(self):
        engine = make_engine()
        run(engine, 400)
        engine.boost()
        assert engine.alpha == pytest.approx(0.3)
        assert engine.active is True

        engine.settle()
        previous = engine.alpha
        steps = 0
        while not engine.is_settled:
            engine.step()
            steps += 1
            assert 0 <= engine.alpha < previous
            previous = engine.alpha
            assert steps <= 300

    def test_boost_keeps_higher_energy(self):
        engine = make_engine()
        engine.boost()
        assert engine.alpha == 1.0
        assert engine.alpha_target == 0.3

    def test_decay_override(self):
        engine = make_engine()
        engine.step(decay=0)
        assert engine.alpha == 1.0
        engine.step(decay=1)
        assert engine.alpha == 0.0

    def test_decay_out_of_range(self):
        with pytest.raises(ValueError):
            make_engine().step(decay=1.5)


class TestPins:

    def test_pinned_node_sits_on_pin(self):
        engine = make_engine()
        engine.pin("C", 17.5, 333.25)
        for _ in range(20):
            positions = engine.step()
            assert positions["C"] == (17.5, 333.25)

    def test_unpinned_node_moves_again(self):
        engine = make_engine()
        engine.pin("C", 0.0, 0.0)
        engine.step()
        engine.unpin("C")
        engine.step()
        assert engine.positions()["C"] != (0.0, 0.0)

    def test_pin_rejects_non_finite(self):
        with pytest.raises(ValueError):
            make_engine().pin("A", float("nan"), 0.0)

    def test_pin_unknown_node(self):
        with pytest.raises(KeyError):
            make_engine().pin("Z", 0.0, 0.0)


class TestDrag:

    def test_drag_cycle(self):
        engine = make_engine()
        run(engine, 400)
        node = engine.nodes["B"]
        start = (node.x, node.y)

        engine.drag_start("B", owner="mouse")
        assert (node.fx, node.fy) == start
        assert engine.alpha_target == 0.3
        assert engine.active is True

        assert engine.drag_move("B", 120.0, 80.0, owner="mouse")
        engine.step()
        assert engine.positions()["B"] == (120.0, 80.0)

        assert engine.drag_end("B", owner="mouse")
        assert node.fx is None and node.fy is None
        assert engine.alpha_target == 0.0
        assert "B" not in engine.sessions

    def test_foreign_owner_cannot_move_or_release(self):
        engine = make_engine()
        engine.drag_start("A", owner="mouse")
        pin = (engine.nodes["A"].fx, engine.nodes["A"].fy)

        assert engine.drag_move("A", 1.0, 1.0, owner="touch") is False
        assert engine.drag_end("A", owner="touch") is False
        assert (engine.nodes["A"].fx, engine.nodes["A"].fy) == pin
        assert "A" in engine.sessions

    def test_second_start_takes_over_owner(self):
        engine = make_engine()
        engine.drag_start("A", owner="mouse")
        engine.drag_start("A", owner="touch")

        assert engine.sessions["A"].owner == "touch"
        assert engine.drag_move("A", 1.0, 2.0, owner="mouse") is False
        assert engine.drag_move("A", 1.0, 2.0, owner="touch") is True

    def test_move_without_session_ignored(self):
        engine = make_engine()
        assert engine.drag_move("A", 1.0, 2.0) is False
        assert engine.nodes["A"].fx is None

    def test_concurrent_drags_settle_after_last(self):
        engine = make_engine()
        engine.drag_start("A", owner=1)
        engine.drag_start("E", owner=2)

        engine.drag_end("A", owner=1)
        assert engine.alpha_target == 0.3
        assert engine.nodes["E"].pinned

        engine.drag_end("E", owner=2)
        assert engine.alpha_target == 0.0


class TestResize:

    def test_zero_size_skips_until_laid_out(self):
        engine = make_engine()
        engine.resize(0, 400)
        with pytest.raises(TransientRenderSkip):
            engine.step()

        engine.resize(800, 400)
        engine.step()
        assert engine.center == (400, 200)

    def test_resize_reheats(self):
        engine = make_engine()
        run(engine, 400)
        engine.resize(300, 300)
        assert engine.alpha == pytest.approx(0.3)
        assert engine.active is True
        assert engine.alpha_target == 0.0


class TestEndToEnd:

    def test_demo_graph_spreads_and_centers(self):
        engine = GraphLayoutEngine.from_networkx(demo_graph(), 600, 400, seed=7)
        run(engine, 500)

        positions = engine.positions()
        for p, q in itertools.combinations(positions.values(), 2):
            assert math.dist(p, q) > 5

        cx = sum(x for x, _ in positions.values()) / len(positions)
        cy = sum(y for _, y in positions.values()) / len(positions)
        assert cx == pytest.approx(300, abs=1.0)
        assert cy == pytest.approx(200, abs=1.0)

    def test_link_segments_track_nodes(self):
        engine = make_engine()
        engine.step()
        segments = engine.link_segments()
        assert len(segments) == 8

        u, v, x1, y1, x2, y2 = segments[0]
        assert (u, v) == ("A", "B")
        assert (x1, y1) == engine.positions()["A"]
        assert (x2, y2) == engine.positions()["B"]
