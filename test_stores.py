"""Tests for the node and edge stores."""

import pytest

from gridflow import ActivityKind, Edge, EdgeStore, Node, NodeStore, NodeStoreObserver


class RecordingObserver(NodeStoreObserver):
    def __init__(self):
        self.events = []

    def nodes_about_to_be_inserted(self, row):
        self.events.append(("inserting", row))

    def nodes_inserted(self, row):
        self.events.append(("inserted", row))

    def nodes_about_to_be_removed(self, row):
        self.events.append(("removing", row))

    def nodes_removed(self, row):
        self.events.append(("removed", row))

    def node_changed(self, row):
        self.events.append(("changed", row))


def make_node(node_id, col, row, kind=ActivityKind.START):
    return Node(id=node_id, kind=kind, col=col, row=row)


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def nodes(observer):
    return NodeStore(observer=observer)


class TestNodeStore:
    def test_empty_store(self, nodes):
        assert len(nodes) == 0
        assert nodes.all() == []
        assert nodes.get(1) is None
        assert nodes.find_at(0, 0) is None

    def test_insert_indexes_by_id_and_cell(self, nodes, observer):
        node = make_node(1, 2, 3)
        nodes.insert(node)
        assert nodes.get(1) is node
        assert nodes.find_at(2, 3) is node
        assert 1 in nodes
        assert nodes.row_of(1) == 0
        assert nodes.at(0) is node
        assert observer.events == [("inserting", 0), ("inserted", 0)]

    def test_insert_duplicate_id_raises(self, nodes):
        nodes.insert(make_node(1, 0, 0))
        with pytest.raises(ValueError):
            nodes.insert(make_node(1, 5, 5))

    def test_insert_occupied_cell_raises(self, nodes):
        nodes.insert(make_node(1, 0, 0))
        with pytest.raises(ValueError):
            nodes.insert(make_node(2, 0, 0))

    def test_replace_takes_over_cell_and_row(self, nodes, observer):
        nodes.insert(make_node(1, 0, 0))
        nodes.insert(make_node(2, 1, 1))
        observer.events.clear()

        evicted = nodes.replace(make_node(3, 0, 0, ActivityKind.STOP))

        assert evicted.id == 1
        assert nodes.get(1) is None
        assert nodes.find_at(0, 0).id == 3
        assert [node.id for node in nodes.all()] == [3, 2]
        assert observer.events == [("changed", 0)]

    def test_replace_on_free_cell_inserts(self, nodes):
        assert nodes.replace(make_node(1, 4, 4)) is None
        assert nodes.find_at(4, 4).id == 1

    def test_move_updates_cell_index(self, nodes, observer):
        nodes.insert(make_node(1, 0, 0))
        observer.events.clear()

        assert nodes.move(1, 3, 2) is True

        assert nodes.find_at(0, 0) is None
        assert nodes.find_at(3, 2).id == 1
        assert nodes.get(1).cell == (3, 2)
        assert observer.events == [("changed", 0)]

    def test_move_to_same_cell_is_silent(self, nodes, observer):
        nodes.insert(make_node(1, 0, 0))
        observer.events.clear()
        assert nodes.move(1, 0, 0) is False
        assert observer.events == []

    def test_move_onto_other_node_raises(self, nodes):
        nodes.insert(make_node(1, 0, 0))
        nodes.insert(make_node(2, 1, 0))
        with pytest.raises(ValueError):
            nodes.move(1, 1, 0)

    def test_move_unknown_node_raises(self, nodes):
        with pytest.raises(ValueError):
            nodes.move(42, 1, 0)

    def test_remove(self, nodes, observer):
        nodes.insert(make_node(1, 0, 0))
        nodes.insert(make_node(2, 1, 0))
        observer.events.clear()

        removed = nodes.remove(1)

        assert removed.id == 1
        assert nodes.find_at(0, 0) is None
        assert nodes.row_of(2) == 0
        assert nodes.row_of(1) == -1
        assert observer.events == [("removing", 0), ("removed", 0)]

    def test_remove_unknown_returns_none(self, nodes, observer):
        assert nodes.remove(99) is None
        assert observer.events == []

    def test_store_without_observer(self):
        store = NodeStore()
        store.insert(make_node(1, 0, 0))
        store.move(1, 1, 1)
        assert store.remove(1) is not None


class TestEdgeStore:
    def test_upsert_creates_edge(self):
        changes = []
        edges = EdgeStore(on_change=lambda: changes.append(True))
        edge = edges.upsert_by_from(1, 2)
        assert edge == Edge(1, 2)
        assert edges.all() == [Edge(1, 2)]
        assert edges.outgoing(1) == Edge(1, 2)
        assert len(changes) == 1

    def test_upsert_replaces_outgoing_edge(self):
        edges = EdgeStore()
        edges.upsert_by_from(1, 2)
        edges.upsert_by_from(3, 2)
        edges.upsert_by_from(1, 4)
        assert edges.all() == [Edge(3, 2), Edge(1, 4)]
        assert len(edges) == 2

    def test_upsert_same_edge_is_silent(self):
        changes = []
        edges = EdgeStore(on_change=lambda: changes.append(True))
        edges.upsert_by_from(1, 2)
        edges.upsert_by_from(1, 2)
        assert len(changes) == 1
        assert edges.all() == [Edge(1, 2)]

    def test_upsert_same_edge_moves_it_last(self):
        changes = []
        edges = EdgeStore(on_change=lambda: changes.append(True))
        edges.upsert_by_from(1, 2)
        edges.upsert_by_from(3, 2)
        edges.upsert_by_from(1, 2)
        assert edges.all() == [Edge(3, 2), Edge(1, 2)]
        assert len(changes) == 3

    def test_fan_in_allowed(self):
        edges = EdgeStore()
        edges.upsert_by_from(1, 3)
        edges.upsert_by_from(2, 3)
        assert edges.incoming(3) == [Edge(1, 3), Edge(2, 3)]

    def test_remove_incident_to_removes_both_directions(self):
        edges = EdgeStore()
        edges.upsert_by_from(1, 2)
        edges.upsert_by_from(2, 3)
        edges.upsert_by_from(4, 3)

        removed = edges.remove_incident_to(2)

        assert set(removed) == {Edge(1, 2), Edge(2, 3)}
        assert edges.all() == [Edge(4, 3)]

    def test_remove_incident_to_without_match(self):
        changes = []
        edges = EdgeStore(on_change=lambda: changes.append(True))
        edges.upsert_by_from(1, 2)
        changes.clear()
        assert edges.remove_incident_to(9) == []
        assert changes == []
