import pytest

from src.corridor.data.road_graph import InMemoryRoadGraph
from src.corridor.models.domain import BBox, Node, RoadEdge
from src.corridor.services.buffer.errors import NoMatchingRoad
from src.corridor.services.buffer.naming import road_key
from src.corridor.services.buffer.search import (
    find_primary_start,
    find_secondary_start,
    nearest_start_feature,
    query_matching_edges,
)

KEY = road_key("Main St")


def _graph(nodes: dict[int, tuple[float, float]], edges: list[RoadEdge]) -> InMemoryRoadGraph:
    return InMemoryRoadGraph([Node(nid, lat, lon) for nid, (lat, lon) in nodes.items()], edges)


def _edge(edge_id, base, adj, pillars=(), backward=True, name="Main Street"):
    return RoadEdge(edge_id=edge_id, base_node=base, adj_node=adj, pillars=tuple(pillars), backward=backward, name=name)


def _east_west_road(lat: float, name: str = "Main Street", edge_id: int = 1, first_node: int = 1) -> tuple[dict, RoadEdge]:
    nodes = {first_node: (lat, -0.001), first_node + 1: (lat, 0.001)}
    return nodes, _edge(edge_id, first_node, first_node + 1, pillars=[(lat, 0.0)], name=name)


def test_query_matching_edges_filters_by_name():
    main_nodes, main = _east_west_road(0.0005)
    oak_nodes, oak = _east_west_road(0.0, name="Oak Ave", edge_id=2, first_node=3)
    graph = _graph({**main_nodes, **oak_nodes}, [main, oak])

    assert query_matching_edges(graph, BBox.around(0.0, 0.0, 0.001), KEY) == [1]
    assert query_matching_edges(graph, BBox.around(0.0, 0.0, 0.001), road_key("oak ave")) == [2]


def test_primary_search_expands_box_until_road_is_found():
    nodes, edge = _east_west_road(0.0015)
    graph = _graph(nodes, [edge])

    feature = find_primary_start(graph, 0.0, 0.0, KEY, 0.001)

    assert feature.edge_id == 1
    assert feature.point == (0.0015, 0.0)
    assert feature.distance == 0.0


def test_primary_search_gives_up_after_three_pulses():
    nodes, edge = _east_west_road(0.0035)
    graph = _graph(nodes, [edge])

    with pytest.raises(NoMatchingRoad, match="Could not find road"):
        find_primary_start(graph, 0.0, 0.0, KEY, 0.001)


def test_primary_search_ignores_other_roads():
    nodes, edge = _east_west_road(0.0, name="Oak Ave")
    graph = _graph(nodes, [edge])

    with pytest.raises(NoMatchingRoad):
        find_primary_start(graph, 0.0, 0.0, KEY, 0.001)


def test_nearest_start_feature_first_seen_wins_ties():
    north_nodes, north = _east_west_road(0.0005)
    south_nodes, south = _east_west_road(-0.0005, edge_id=2, first_node=3)
    graph = _graph({**north_nodes, **south_nodes}, [north, south])

    assert nearest_start_feature(graph, [1, 2], 0.0, 0.0).edge_id == 1
    assert nearest_start_feature(graph, [2, 1], 0.0, 0.0).edge_id == 2
    assert nearest_start_feature(graph, [], 0.0, 0.0) is None


def test_edges_without_pillars_cannot_anchor_a_start():
    nodes = {1: (0.0, -0.0005), 2: (0.0, 0.0005), 3: (0.0015, -0.001), 4: (0.0015, 0.001)}
    edges = [_edge(1, 1, 2), _edge(2, 3, 4, pillars=[(0.0015, 0.0)])]
    graph = _graph(nodes, edges)

    feature = find_primary_start(graph, 0.0, 0.0, KEY, 0.001)

    assert feature.edge_id == 2


def _divided_road() -> InMemoryRoadGraph:
    nodes = {
        1: (0.0, 0.0),
        2: (0.0, 0.002),
        3: (0.0002, 0.002),
        4: (0.0002, 0.0),
        5: (0.0, 0.004),
        6: (0.0, -0.002),
        7: (-0.0001, 0.0005),
        8: (-0.0001, 0.0015),
    }
    edges = [
        # eastbound carriageway
        _edge(1, 1, 2, pillars=[(0.0, 0.001)], backward=False),
        # westbound carriageway
        _edge(2, 3, 4, pillars=[(0.0002, 0.001)], backward=False),
        # continues the eastbound edge
        _edge(3, 2, 5, pillars=[(0.0, 0.003)], backward=False),
        # feeds the eastbound edge
        _edge(4, 6, 1, pillars=[(0.0, -0.001)], backward=False),
        # two-way service road closer than the westbound carriageway
        _edge(5, 7, 8, pillars=[(-0.0001, 0.001)]),
    ]
    return _graph(nodes, edges)


def test_secondary_search_finds_opposite_carriageway():
    graph = _divided_road()
    primary = find_primary_start(graph, 0.0, 0.001, KEY, 0.001)
    assert primary.edge_id == 1

    secondary = find_secondary_start(graph, primary, KEY, 0.0005)

    assert secondary.edge_id == 2
    assert secondary.point == (0.0002, 0.001)


def test_secondary_search_without_opposite_carriageway():
    nodes = {1: (0.0, 0.0), 2: (0.0, 0.002), 5: (0.0, 0.004)}
    edges = [
        _edge(1, 1, 2, pillars=[(0.0, 0.001)], backward=False),
        _edge(3, 2, 5, pillars=[(0.0, 0.003)], backward=False),
    ]
    graph = _graph(nodes, edges)
    primary = find_primary_start(graph, 0.0, 0.001, KEY, 0.001)

    with pytest.raises(NoMatchingRoad):
        find_secondary_start(graph, primary, KEY, 0.0005)


def test_primary_search_matches_road_named_inside_longer_name():
    nodes, edge = _east_west_road(0.0, name="Sam Brown Rd")
    graph = _graph(nodes, [edge])

    feature = find_primary_start(graph, 0.0, 0.0, road_key("Brown Rd"), 0.001)

    assert feature.edge_id == 1
