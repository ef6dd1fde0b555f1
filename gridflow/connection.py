"""Click-to-connect workflow.

A connection is made in two clicks: the handle on the source node arms
the controller, a click on another node commits the edge. While armed the
pointer position is tracked as a preview endpoint for the renderer.

    Idle --arm_start(n)--> Armed(n, None)
    Armed(s, _) --pointer_move(p)--> Armed(s, p)
    Armed(s, _) --pointer_leave_surface--> Armed(s, None)
    Armed(s, _) --click_target(s)--> Idle              (cancel)
    Armed(s, _) --click_target(t)--> Idle              (edge s -> t)
    Armed(s, _) --arm_start(n)--> Armed(n, None)       (re-arm)
"""

from __future__ import annotations

import logging
from typing import Optional

from .grid import is_grid_index
from .stores import EdgeStore, NodeStore
from .types import IDLE, Armed, ConnectionPreview, ConnectionState, Edge, Point

logger = logging.getLogger(__name__)


class ConnectionController:
    """Drives the connection state machine over the node and edge stores."""

    def __init__(self, nodes: NodeStore, edges: EdgeStore):
        self._nodes = nodes
        self._edges = edges
        self._state: ConnectionState = IDLE

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_armed(self) -> bool:
        return isinstance(self._state, Armed)

    @property
    def source_id(self) -> Optional[int]:
        if isinstance(self._state, Armed):
            return self._state.source_id
        return None

    def current_preview(self) -> Optional[ConnectionPreview]:
        if not isinstance(self._state, Armed):
            return None
        return ConnectionPreview(self._state.source_id, self._state.preview_point)

    # --- Events -------------------------------------------------------------
    def arm_start(self, node_id: int) -> bool:
        """Choose ``node_id`` as the source, discarding any pending source."""
        if not is_grid_index(node_id) or node_id not in self._nodes:
            logger.debug("Ignoring arm on unknown node %r", node_id)
            return False
        self._state = Armed(node_id)
        return True

    def pointer_move(self, point: Point) -> bool:
        if not isinstance(self._state, Armed):
            return False
        if self._state.preview_point == point:
            return False
        self._state = Armed(self._state.source_id, point)
        return True

    def pointer_leave_surface(self) -> bool:
        if not isinstance(self._state, Armed) or self._state.preview_point is None:
            return False
        self._state = Armed(self._state.source_id)
        return True

    def click_target(self, node_id: int) -> Optional[Edge]:
        """Commit or cancel the pending connection.

        Clicking the source itself cancels. Returns the committed edge, or
        None when no edge was created.
        """
        if not isinstance(self._state, Armed):
            return None
        if not is_grid_index(node_id):
            logger.debug("Ignoring click with malformed node id %r", node_id)
            return None
        source_id = self._state.source_id
        if node_id == source_id:
            logger.debug("Connection from node %s cancelled", source_id)
            self._state = IDLE
            return None
        if node_id not in self._nodes:
            logger.debug("Ignoring click on unknown node %r", node_id)
            return None
        if source_id not in self._nodes:
            # The source was evicted while armed; never connect a ghost.
            logger.debug("Connection source %s no longer exists", source_id)
            self._state = IDLE
            return None
        edge = self._edges.upsert_by_from(source_id, node_id)
        self._state = IDLE
        logger.debug("Connected node %s -> node %s", source_id, node_id)
        return edge

    def cancel(self) -> bool:
        if not isinstance(self._state, Armed):
            return False
        self._state = IDLE
        return True
