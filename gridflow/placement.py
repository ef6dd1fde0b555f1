"""Grid placement with collision eviction.

Dropping anything on an occupied cell destroys the occupant together with
every edge touching it. Eviction is a single level: the dropped node never
displaces a further node.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Iterator, Optional

from .constants import FIRST_NODE_ID
from .grid import GridConfig, is_grid_index
from .stores import EdgeStore, NodeStore
from .types import ActivityKind, FromCanvas, FromPalette, Node, PlacementResult

logger = logging.getLogger(__name__)


class PlacementController:
    """Resolves palette and canvas drops into store mutations."""

    def __init__(
        self,
        nodes: NodeStore,
        edges: EdgeStore,
        grid: Optional[GridConfig] = None,
        id_source: Optional[Iterator[int]] = None,
    ):
        self._nodes = nodes
        self._edges = edges
        self._grid = grid or GridConfig()
        self._id_source = id_source if id_source is not None else count(FIRST_NODE_ID)

    @property
    def grid(self) -> GridConfig:
        return self._grid

    def place_or_move(self, request: object) -> Optional[PlacementResult]:
        """Apply a placement request.

        Returns None when the request was ignored (malformed payload, target
        outside the surface, unknown node).
        """
        if isinstance(request, FromPalette):
            if not isinstance(request.kind, ActivityKind):
                logger.debug("Ignoring palette drop with unknown kind %r", request.kind)
                return None
            if not self._grid.contains(request.target_col, request.target_row):
                logger.debug("Ignoring palette drop outside the surface: %r", request)
                return None
            return self._place_new(request)
        if isinstance(request, FromCanvas):
            if not is_grid_index(request.node_id):
                logger.debug("Ignoring canvas drop with malformed node id %r", request.node_id)
                return None
            if not self._grid.contains(request.target_col, request.target_row):
                logger.debug("Ignoring canvas drop outside the surface: %r", request)
                return None
            return self._move_existing(request)
        logger.debug("Ignoring malformed placement request %r", request)
        return None

    def _place_new(self, request: FromPalette) -> PlacementResult:
        col, row = request.target_col, request.target_row
        existing = self._nodes.find_at(col, row)
        node = Node(id=next(self._id_source), kind=request.kind, col=col, row=row)
        if existing is None:
            self._nodes.insert(node)
            return PlacementResult(node)

        removed_edges = self._edges.remove_incident_to(existing.id)
        self._nodes.replace(node)
        logger.debug(
            "Node %s evicted node %s at %s (%d edges removed)",
            node.id, existing.id, node.cell, len(removed_edges),
        )
        return PlacementResult(node, existing, removed_edges)

    def _move_existing(self, request: FromCanvas) -> Optional[PlacementResult]:
        moving = self._nodes.get(request.node_id)
        if moving is None:
            logger.debug("Ignoring drop of unknown node %r", request.node_id)
            return None

        col, row = request.target_col, request.target_row
        existing = self._nodes.find_at(col, row)
        if existing is None or existing.id == moving.id:
            self._nodes.move(moving.id, col, row)
            return PlacementResult(moving)

        # Edges go first so the stores never hold an edge to a missing node.
        removed_edges = self._edges.remove_incident_to(existing.id)
        self._nodes.remove(existing.id)
        self._nodes.move(moving.id, col, row)
        logger.debug(
            "Node %s moved onto %s, evicting node %s (%d edges removed)",
            moving.id, moving.cell, existing.id, len(removed_edges),
        )
        return PlacementResult(moving, existing, removed_edges)
