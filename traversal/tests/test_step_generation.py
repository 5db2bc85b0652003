"""Step generator tests

These tests drive the Burr traversal app end to end and check:
- The 4-cycle scenarios for BFS and DFS
- Per-step invariants (monotone visited set, tree edges, 0-based indices)
- Multi-component runs with a global discovery rank
- BFS levels and DFS discovery/finish clocks
- Determinism and run keys
"""

import time

import pytest

from graph import (
    Algorithm,
    Graph,
    GraphEdge,
    GraphNode,
    InvalidStartState,
    build_adjacency_index,
)
from traversal import (
    BreadthFirstFrontier,
    DepthFirstFrontier,
    build_traversal_app,
    generate_bfs_steps,
    generate_dfs_steps,
    generate_run_key,
    generate_steps,
    get_frontier,
)


def make_graph(node_ids, pairs, graph_type="undirected") -> Graph:
    return Graph(
        nodes=[GraphNode(id=node_id) for node_id in node_ids],
        edges=[GraphEdge.between(source, target) for source, target in pairs],
        graph_type=graph_type,
    )


def run(graph: Graph, algorithm: str, start: str):
    adjacency = build_adjacency_index(graph.node_ids, graph.edges, graph.graph_type)
    return generate_steps(algorithm, start, adjacency, graph.node_ids)


@pytest.fixture
def square() -> Graph:
    """4-cycle 1-2-3-4-1."""
    return make_graph(["1", "2", "3", "4"], [("1", "2"), ("2", "3"), ("3", "4"), ("4", "1")])


@pytest.fixture
def split() -> Graph:
    """Three components: {1, 2}, {3}, {4, 5}."""
    return make_graph(["1", "2", "3", "4", "5"], [("1", "2"), ("4", "5")])


class TestFrontierRegistry:
    """Test frontier disciplines."""

    def test_bfs_pops_head(self):
        assert BreadthFirstFrontier().pop(["a", "b", "c"]) == ("a", ["b", "c"])

    def test_dfs_pops_top(self):
        assert DepthFirstFrontier().pop(["a", "b", "c"]) == ("c", ["a", "b"])

    def test_dfs_pushes_in_reverse(self):
        assert DepthFirstFrontier().push_order(["a", "b", "c"]) == ["c", "b", "a"]

    def test_lookup_by_string(self):
        assert get_frontier("DFS").algorithm == Algorithm.DFS
        assert get_frontier(Algorithm.BFS).tracks_level

    def test_unknown_algorithm_raises(self):
        with pytest.raises(ValueError, match="Unknown algorithm"):
            get_frontier("Dijkstra")


class TestBFSScenario:
    """BFS on the 4-cycle from node 1."""

    def test_visit_order_and_tree_edges(self, square):
        steps, log = run(square, "BFS", "1")
        assert log.visited_nodes == ["1", "2", "4", "3"]
        assert log.traversed_edges == ["1-2", "1-4", "2-3"]
        assert log.components == [["1", "2", "4", "3"]]

    def test_step_sequence(self, square):
        steps, _ = run(square, "BFS", "1")
        assert len(steps) == 8
        assert [step.current_node for step in steps] == ["1", "1", "1", "2", "2", "4", "4", "3"]
        assert steps[0].visited_nodes == []
        assert steps[0].frontier == ["1"]
        assert steps[2].frontier == ["2", "4"]
        assert steps[4].frontier == ["4", "3"]
        assert steps[-1].frontier == []

    def test_levels(self, square):
        steps, _ = run(square, "BFS", "1")
        assert steps[-1].level == {"1": 0, "2": 1, "4": 1, "3": 2}
        assert steps[-1].discovery_time is None
        assert steps[-1].finish_time is None

    def test_level_is_parent_level_plus_one(self, square):
        steps, _ = run(square, "BFS", "1")
        final = steps[-1]
        for node, parent in final.parent_map.items():
            if parent is not None:
                assert final.level[node] == final.level[parent] + 1

    def test_node_order_and_parents(self, square):
        steps, _ = run(square, "BFS", "1")
        final = steps[-1]
        assert final.node_order == {"1": 1, "2": 2, "4": 3, "3": 4}
        assert final.parent_map == {"1": None, "2": "1", "4": "1", "3": "2"}


class TestDFSScenario:
    """DFS on the 4-cycle from node 1."""

    def test_visit_order_and_tree_edges(self, square):
        steps, log = run(square, "DFS", "1")
        assert log.visited_nodes == ["1", "2", "3", "4"]
        assert log.traversed_edges == ["1-2", "2-3", "1-4"]
        assert len(steps) == 8

    def test_stack_top_is_last(self, square):
        steps, _ = run(square, "DFS", "1")
        assert steps[2].frontier == ["4", "2"]
        assert steps[4].frontier == ["4", "3"]

    def test_discovery_and_finish_clocks(self, square):
        steps, log = run(square, "DFS", "1")
        assert log.discovery_time == {"1": 1, "2": 2, "3": 3, "4": 4}
        assert log.finish_time == {"1": 5, "2": 6, "3": 7, "4": 8}
        assert steps[-1].level is None

    def test_reversed_push_visits_in_adjacency_order(self):
        star = make_graph(["1", "2", "3", "4"], [("1", "2"), ("1", "3"), ("1", "4")])
        _, log = run(star, "DFS", "1")
        assert log.visited_nodes == ["1", "2", "3", "4"]

    def test_finish_stamps_visible_in_later_components(self, split):
        steps, log = run(split, "DFS", "1")
        seed_of_second = next(step for step in steps if step.current_node == "3")
        assert seed_of_second.finish_time == {"1": 3, "2": 4}
        assert log.finish_time["5"] == max(log.finish_time.values())


class TestMultiComponent:
    """Runs that continue past the start node's component."""

    def test_components_in_node_list_order(self, split):
        steps, log = run(split, "BFS", "1")
        assert log.components == [["1", "2"], ["3"], ["4", "5"]]
        assert len(steps) == 10

    def test_rank_is_global(self, split):
        steps, _ = run(split, "BFS", "1")
        assert steps[-1].node_order == {"1": 1, "2": 2, "3": 3, "4": 4, "5": 5}

    def test_roots_have_no_parent_and_level_zero(self, split):
        steps, _ = run(split, "BFS", "1")
        final = steps[-1]
        assert final.parent_map["3"] is None
        assert final.parent_map["4"] is None
        assert final.level["4"] == 0
        assert final.level["5"] == 1

    def test_seed_step_shows_global_visited(self, split):
        steps, _ = run(split, "BFS", "1")
        seed = steps[4]
        assert seed.current_node == "3"
        assert seed.visited_nodes == ["1", "2"]
        assert seed.frontier == ["3"]

    def test_start_in_middle_scans_from_first_node(self, split):
        _, log = run(split, "DFS", "3")
        assert log.components == [["3"], ["1", "2"], ["4", "5"]]

    def test_directed_never_revisits(self):
        graph = make_graph(["1", "2", "3"], [("2", "1")], graph_type="directed")
        steps, log = run(graph, "BFS", "1")
        assert log.visited_nodes == ["1", "2", "3"]
        assert log.components == [["1"], ["2"], ["3"]]
        assert log.traversed_edges == []
        assert steps[-1].node_order == {"1": 1, "2": 2, "3": 3}

    def test_single_isolated_node(self):
        graph = make_graph(["solo"], [])
        steps, log = run(graph, "BFS", "solo")
        assert len(steps) == 2
        assert log.visited_nodes == ["solo"]


GRAPH_CASES = [
    pytest.param(
        make_graph(["1", "2", "3", "4", "5"], [("1", "2"), ("4", "5")]),
        "4",
        id="undirected-split",
    ),
    pytest.param(
        make_graph(
            ["1", "2", "3", "4", "5", "6", "7", "8"],
            [("1", "2"), ("2", "3"), ("3", "4"), ("4", "1"), ("1", "3"), ("6", "7"), ("7", "8"), ("8", "6")],
        ),
        "7",
        id="undirected-cycles",
    ),
    pytest.param(
        # 3 and 5 are later roots that reach earlier components
        make_graph(
            ["1", "2", "3", "4", "5", "6"],
            [("1", "2"), ("3", "1"), ("3", "4"), ("5", "4"), ("5", "6"), ("6", "5")],
            graph_type="directed",
        ),
        "1",
        id="directed-back-reach",
    ),
    pytest.param(
        make_graph(
            ["a", "b", "c", "d", "e"],
            [("a", "b"), ("b", "c"), ("c", "a"), ("d", "c")],
            graph_type="directed",
        ),
        "b",
        id="directed-cycle-tail",
    ),
]


class TestStepInvariants:
    """Properties every generated sequence must satisfy."""

    @pytest.mark.parametrize("algorithm", ["BFS", "DFS"])
    @pytest.mark.parametrize("graph, start", GRAPH_CASES)
    def test_invariants(self, graph, start, algorithm):
        steps, log = run(graph, algorithm, start)
        previous_visited: list[str] = []
        previous_edges: list[str] = []
        for i, step in enumerate(steps):
            assert step.step_index == i
            assert step.total_steps == len(steps)
            assert len(set(step.visited_nodes)) == len(step.visited_nodes)
            assert step.visited_nodes[: len(previous_visited)] == previous_visited
            assert step.traversed_edges[: len(previous_edges)] == previous_edges
            assert not set(step.frontier) & set(step.visited_nodes)
            previous_visited = step.visited_nodes
            previous_edges = step.traversed_edges

        final = steps[-1]
        visited = log.visited_nodes
        assert sorted(visited) == sorted(graph.node_ids)
        assert final.visited_nodes == visited

        # Components partition the visited nodes
        assert sum(len(component) for component in log.components) == len(visited)
        assert len(final.node_order) == len(visited)
        assert sorted(node for component in log.components for node in component) == sorted(visited)

        # node_order is the permutation 1..K in discovery order
        assert sorted(final.node_order.values()) == list(range(1, len(visited) + 1))
        assert [final.node_order[node] for node in visited] == list(range(1, len(visited) + 1))

        # Exactly one root per component, and it is the component's first node
        roots = [node for node, parent in final.parent_map.items() if parent is None]
        assert len(roots) == len(log.components)
        assert roots == [component[0] for component in log.components]

        # A spanning forest has one tree edge per non-root node
        assert len(log.traversed_edges) == len(visited) - len(log.components)
        for edge in log.traversed_edges:
            parent, child = edge.split("-")
            assert final.parent_map[child] == parent

    def test_directed_later_root_does_not_revisit(self):
        graph = GRAPH_CASES[2].values[0]
        _, log = run(graph, "DFS", "1")
        assert log.components == [["1", "2"], ["3", "4"], ["5", "6"]]
        assert log.traversed_edges == ["1-2", "3-4", "5-6"]

    @pytest.mark.parametrize("algorithm", ["BFS", "DFS"])
    def test_long_path_generates_quickly(self, algorithm):
        """Generation cost must not grow with the number of steps already emitted."""
        size = 300
        node_ids = [str(i) for i in range(size)]
        graph = make_graph(node_ids, [(str(i), str(i + 1)) for i in range(size - 1)])

        started = time.perf_counter()
        steps, log = run(graph, algorithm, "0")
        elapsed = time.perf_counter() - started

        assert len(log.visited_nodes) == size
        assert steps[-1].total_steps == len(steps)
        assert elapsed < 10.0

    def test_snapshots_are_independent(self, square):
        steps, _ = run(square, "BFS", "1")
        steps[1].visited_nodes.append("tampered")
        assert "tampered" not in steps[2].visited_nodes
        assert steps[1].visited_nodes is not steps[2].visited_nodes

    def test_deterministic(self, square):
        assert run(square, "DFS", "2") == run(square, "DFS", "2")


class TestGeneratorEntryPoints:
    """Test the public generation entry points."""

    def test_algorithm_specific_helpers(self, square):
        adjacency = build_adjacency_index(square.node_ids, square.edges)
        assert generate_bfs_steps("1", adjacency, square.node_ids) == run(square, "BFS", "1")
        assert generate_dfs_steps("1", adjacency, square.node_ids) == run(square, "DFS", "1")

    def test_unknown_start_raises(self, square):
        adjacency = build_adjacency_index(square.node_ids, square.edges)
        with pytest.raises(InvalidStartState):
            build_traversal_app("9", adjacency, square.node_ids)

    def test_run_key_is_deterministic(self, square):
        key = generate_run_key(square, "BFS", "1")
        assert key.startswith("bfs_")
        assert key == generate_run_key(square, Algorithm.BFS, "1")

    def test_run_key_ignores_positions(self, square):
        moved = square.model_copy(
            update={"nodes": [node.model_copy(update={"label": "x"}) for node in square.nodes]}
        )
        assert generate_run_key(square, "DFS", "1") == generate_run_key(moved, "DFS", "1")

    def test_run_key_changes_with_start(self, square):
        assert generate_run_key(square, "BFS", "1") != generate_run_key(square, "BFS", "2")
