"""Canonical node and edge collections for a GridFlow diagram.

The stores know nothing about Qt. A view that needs row-level change
notifications (the Qt list model) registers itself as a
:class:`NodeStoreObserver` and as the edge store's ``on_change`` callback.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .types import Edge, Node


class NodeStoreObserver:
    """Row-level change hooks. The default implementation ignores them all."""

    def nodes_about_to_be_inserted(self, row: int) -> None:
        pass

    def nodes_inserted(self, row: int) -> None:
        pass

    def nodes_about_to_be_removed(self, row: int) -> None:
        pass

    def nodes_removed(self, row: int) -> None:
        pass

    def node_changed(self, row: int) -> None:
        pass


class NodeStore:
    """Placed nodes, indexed by id and by grid cell."""

    def __init__(self, observer: Optional[NodeStoreObserver] = None):
        self._order: List[int] = []
        self._by_id: Dict[int, Node] = {}
        self._by_cell: Dict[Tuple[int, int], int] = {}
        self._observer = observer or NodeStoreObserver()

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id

    def __iter__(self) -> Iterator[Node]:
        return iter(self.all())

    # --- Queries ------------------------------------------------------------
    def get(self, node_id: int) -> Optional[Node]:
        return self._by_id.get(node_id)

    def find_at(self, col: int, row: int) -> Optional[Node]:
        node_id = self._by_cell.get((col, row))
        if node_id is None:
            return None
        return self._by_id[node_id]

    def all(self) -> List[Node]:
        return [self._by_id[node_id] for node_id in self._order]

    def at(self, row: int) -> Node:
        return self._by_id[self._order[row]]

    def row_of(self, node_id: int) -> int:
        """Return the position of ``node_id`` in store order, or -1."""
        if node_id not in self._by_id:
            return -1
        return self._order.index(node_id)

    # --- Mutations ----------------------------------------------------------
    def insert(self, node: Node) -> None:
        if node.id in self._by_id:
            raise ValueError(f"Node {node.id} is already placed")
        if node.cell in self._by_cell:
            raise ValueError(f"Cell {node.cell} is already occupied")
        row = len(self._order)
        self._observer.nodes_about_to_be_inserted(row)
        self._order.append(node.id)
        self._by_id[node.id] = node
        self._by_cell[node.cell] = node.id
        self._observer.nodes_inserted(row)

    def replace(self, node: Node) -> Optional[Node]:
        """Put ``node`` in the cell it names.

        The previous occupant of that cell (if any) is dropped and returned;
        the new node takes over its position in store order.
        """
        if node.id in self._by_id:
            raise ValueError(f"Node {node.id} is already placed")
        occupant = self.find_at(node.col, node.row)
        if occupant is None:
            self.insert(node)
            return None
        row = self._order.index(occupant.id)
        del self._by_id[occupant.id]
        self._order[row] = node.id
        self._by_id[node.id] = node
        self._by_cell[node.cell] = node.id
        self._observer.node_changed(row)
        return occupant

    def move(self, node_id: int, col: int, row: int) -> bool:
        """Update a node's coordinates. Returns False when nothing changed."""
        node = self._by_id.get(node_id)
        if node is None:
            raise ValueError(f"Unknown node {node_id}")
        if node.cell == (col, row):
            return False
        occupant_id = self._by_cell.get((col, row))
        if occupant_id is not None:
            raise ValueError(f"Cell {(col, row)} is occupied by node {occupant_id}")
        del self._by_cell[node.cell]
        node.col = col
        node.row = row
        self._by_cell[node.cell] = node.id
        self._observer.node_changed(self._order.index(node_id))
        return True

    def remove(self, node_id: int) -> Optional[Node]:
        node = self._by_id.get(node_id)
        if node is None:
            return None
        row = self._order.index(node_id)
        self._observer.nodes_about_to_be_removed(row)
        self._order.pop(row)
        del self._by_id[node_id]
        del self._by_cell[node.cell]
        self._observer.nodes_removed(row)
        return node


class EdgeStore:
    """Directed edges keyed by their source; fan-out is capped at one."""

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._by_from: Dict[int, Edge] = {}
        self._on_change = on_change

    def __len__(self) -> int:
        return len(self._by_from)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.all())

    def all(self) -> List[Edge]:
        return list(self._by_from.values())

    def outgoing(self, from_id: int) -> Optional[Edge]:
        return self._by_from.get(from_id)

    def incoming(self, to_id: int) -> List[Edge]:
        return [edge for edge in self._by_from.values() if edge.to_id == to_id]

    def upsert_by_from(self, from_id: int, to_id: int) -> Edge:
        """Create ``from_id -> to_id``, replacing any edge leaving ``from_id``."""
        edge = Edge(from_id, to_id)
        if self._by_from.get(from_id) == edge and next(reversed(self._by_from)) == from_id:
            return edge
        # Drop first so the edge lands at the end of the ordering.
        self._by_from.pop(from_id, None)
        self._by_from[from_id] = edge
        self._notify()
        return edge

    def remove_incident_to(self, node_id: int) -> List[Edge]:
        """Remove every edge whose source or target is ``node_id``."""
        removed = [edge for edge in self._by_from.values() if edge.touches(node_id)]
        if not removed:
            return []
        for edge in removed:
            del self._by_from[edge.from_id]
        self._notify()
        return removed

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
