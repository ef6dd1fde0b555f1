"""Core DiagramModel class for GridFlow.

This module provides the Qt model for one editing session: it owns the
node and edge stores plus the placement and connection controllers, turns
decoded UI events into controller calls and exposes the diagram to QML.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from PySide6.QtCore import (
    QAbstractListModel,
    QMimeData,
    QModelIndex,
    Property,
    Qt,
    Signal,
    Slot,
)

from .connection import ConnectionController
from .constants import ACTIVITY_PRESETS, DRAG_MIME_TYPE, NO_NODE, UNKNOWN_EMOJI
from .grid import GridConfig
from .payload import (
    decode_drop_payload,
    encode_canvas_payload,
    encode_palette_payload,
    payload_from_mime,
    payload_to_mime,
)
from .placement import PlacementController
from .stores import EdgeStore, NodeStore, NodeStoreObserver
from .types import (
    ActivityKind,
    ConnectionPreview,
    ConnectionState,
    Edge,
    FromCanvas,
    FromPalette,
    Node,
    PlacementRequest,
    PlacementResult,
    Point,
)

logger = logging.getLogger(__name__)


class DiagramModel(NodeStoreObserver, QAbstractListModel):
    """Qt model exposing grid nodes to QML."""

    IdRole = Qt.UserRole + 1
    KindRole = Qt.UserRole + 2
    LabelRole = Qt.UserRole + 3
    EmojiRole = Qt.UserRole + 4
    ColRole = Qt.UserRole + 5
    RowRole = Qt.UserRole + 6
    XRole = Qt.UserRole + 7
    YRole = Qt.UserRole + 8
    ArmedRole = Qt.UserRole + 9

    nodesChanged = Signal()
    edgesChanged = Signal()
    connectionChanged = Signal()

    def __init__(self, grid: Optional[GridConfig] = None):
        super().__init__()
        self._grid = grid or GridConfig()
        self._nodes = NodeStore(observer=self)
        self._edges = EdgeStore(on_change=self._mark_edges_dirty)
        self._placement = PlacementController(self._nodes, self._edges, self._grid)
        self._connection = ConnectionController(self._nodes, self._edges)
        self._nodes_dirty = False
        self._edges_dirty = False

    # --- Store observer -----------------------------------------------------
    def nodes_about_to_be_inserted(self, row: int) -> None:
        self.beginInsertRows(QModelIndex(), row, row)

    def nodes_inserted(self, row: int) -> None:
        self.endInsertRows()
        self._nodes_dirty = True

    def nodes_about_to_be_removed(self, row: int) -> None:
        self.beginRemoveRows(QModelIndex(), row, row)

    def nodes_removed(self, row: int) -> None:
        self.endRemoveRows()
        self._nodes_dirty = True

    def node_changed(self, row: int) -> None:
        index = self.index(row, 0)
        self.dataChanged.emit(index, index, [])
        self._nodes_dirty = True

    def _mark_edges_dirty(self) -> None:
        self._edges_dirty = True

    def _flush_changes(self, previous_state: ConnectionState) -> None:
        """Emit summary signals once a handler has finished mutating."""
        nodes_dirty, edges_dirty = self._nodes_dirty, self._edges_dirty
        self._nodes_dirty = False
        self._edges_dirty = False

        state = self._connection.state
        previous_source = getattr(previous_state, "source_id", None)
        current_source = self._connection.source_id
        if previous_source != current_source:
            for node_id in (previous_source, current_source):
                row = self._nodes.row_of(node_id) if node_id is not None else -1
                if row >= 0:
                    index = self.index(row, 0)
                    self.dataChanged.emit(index, index, [self.ArmedRole])

        if nodes_dirty:
            self.nodesChanged.emit()
        if edges_dirty or nodes_dirty:
            self.edgesChanged.emit()
        if state != previous_state or (nodes_dirty and self._connection.is_armed):
            self.connectionChanged.emit()

    # --- Qt model overrides -------------------------------------------------
    def rowCount(self, parent: QModelIndex | None = QModelIndex()) -> int:  # type: ignore[override]
        return len(self._nodes)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):  # type: ignore[override]
        if not index.isValid() or not (0 <= index.row() < len(self._nodes)):
            return None

        node = self._nodes.at(index.row())
        if role == self.IdRole:
            return node.id
        if role == self.KindRole:
            return node.kind.value
        if role in (self.LabelRole, Qt.DisplayRole):
            return self._preset(node.kind).get("label", node.kind.value)
        if role == self.EmojiRole:
            return self._preset(node.kind).get("emoji", UNKNOWN_EMOJI)
        if role == self.ColRole:
            return node.col
        if role == self.RowRole:
            return node.row
        if role == self.XRole:
            return self._grid.cell_origin(node.col, node.row)[0]
        if role == self.YRole:
            return self._grid.cell_origin(node.col, node.row)[1]
        if role == self.ArmedRole:
            return self._connection.source_id == node.id
        return None

    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return {
            self.IdRole: b"nodeId",
            self.KindRole: b"kind",
            self.LabelRole: b"label",
            self.EmojiRole: b"emoji",
            self.ColRole: b"col",
            self.RowRole: b"row",
            self.XRole: b"x",
            self.YRole: b"y",
            self.ArmedRole: b"armed",
        }

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:  # type: ignore[override]
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable | Qt.ItemIsDragEnabled

    def mimeTypes(self) -> List[str]:  # type: ignore[override]
        return [DRAG_MIME_TYPE]

    def mimeData(self, indexes) -> Optional[QMimeData]:  # type: ignore[override]
        """Package the first dragged node as a canvas drop payload."""
        nodes = self._nodes.all()
        for index in indexes:
            if index.isValid() and 0 <= index.row() < len(nodes):
                return payload_to_mime(encode_canvas_payload(nodes[index.row()]))
        return None

    # --- Properties exposed to QML -----------------------------------------
    @Property(int, notify=nodesChanged)
    def count(self) -> int:
        return len(self._nodes)

    @Property(list, notify=nodesChanged)
    def nodes(self) -> List[Dict[str, Any]]:
        return [self._node_snapshot(node) for node in self._nodes.all()]

    @Property(list, notify=edgesChanged)
    def edges(self) -> List[Dict[str, Any]]:
        result = []
        for edge in self._edges.all():
            source = self._nodes.get(edge.from_id)
            target = self._nodes.get(edge.to_id)
            if source is None or target is None:
                continue
            from_x, from_y = self._grid.cell_center(source.col, source.row)
            to_x, to_y = self._grid.cell_center(target.col, target.row)
            result.append({
                "fromId": edge.from_id,
                "toId": edge.to_id,
                "fromX": from_x,
                "fromY": from_y,
                "toX": to_x,
                "toY": to_y,
            })
        return result

    @Property(list, constant=True)
    def activityKinds(self) -> List[Dict[str, str]]:
        return [
            {
                "kind": kind.value,
                "label": self._preset(kind).get("label", kind.value),
                "emoji": self._preset(kind).get("emoji", UNKNOWN_EMOJI),
            }
            for kind in ActivityKind
        ]

    @Property(int, notify=connectionChanged)
    def connectionSourceId(self) -> int:
        source_id = self._connection.source_id
        return NO_NODE if source_id is None else source_id

    @Property(bool, notify=connectionChanged)
    def isArmed(self) -> bool:
        return self._connection.is_armed

    @Property(bool, notify=connectionChanged)
    def hasPreviewPoint(self) -> bool:
        preview = self._connection.current_preview()
        if preview is None or preview.preview_point is None:
            return False
        return preview.source_id in self._nodes

    @Property(float, notify=connectionChanged)
    def previewOriginX(self) -> float:
        return self._preview_origin()[0]

    @Property(float, notify=connectionChanged)
    def previewOriginY(self) -> float:
        return self._preview_origin()[1]

    @Property(float, notify=connectionChanged)
    def previewX(self) -> float:
        point = self._preview_point()
        return point.x if point else 0.0

    @Property(float, notify=connectionChanged)
    def previewY(self) -> float:
        point = self._preview_point()
        return point.y if point else 0.0

    @Property(int, constant=True)
    def cellSize(self) -> int:
        return self._grid.cell_size

    @Property(int, constant=True)
    def nodeSize(self) -> int:
        return self._grid.node_size

    @Property(int, constant=True)
    def surfaceWidth(self) -> int:
        return self._grid.surface_width

    @Property(int, constant=True)
    def surfaceHeight(self) -> int:
        return self._grid.surface_height

    # --- Placement ----------------------------------------------------------
    def place(self, request: PlacementRequest) -> Optional[PlacementResult]:
        """Apply a decoded placement request and notify views."""
        previous_state = self._connection.state
        result = self._placement.place_or_move(request)
        self._flush_changes(previous_state)
        return result

    @Slot(str, int, int, result=int)
    def onPaletteDrop(self, kind: str, col: int, row: int) -> int:
        activity = ActivityKind.parse(kind)
        if activity is None:
            logger.debug("Ignoring palette drop of unknown kind %r", kind)
            return NO_NODE
        result = self.place(FromPalette(activity, col, row))
        return result.node.id if result else NO_NODE

    @Slot(int, int, int, result=bool)
    def onCanvasNodeDrop(self, node_id: int, col: int, row: int) -> bool:
        return self.place(FromCanvas(node_id, col, row)) is not None

    @Slot(str, float, float, result=bool)
    def dropPayload(self, raw: str, x: float, y: float) -> bool:
        """Handle a drop of an encoded drag payload at pixel ``(x, y)``."""
        cell = self._grid.cell_at(x, y)
        if cell is None:
            logger.debug("Ignoring drop off the surface at (%s, %s)", x, y)
            return False
        request = decode_drop_payload(raw, *cell)
        if request is None:
            logger.debug("Ignoring undecodable drop payload %r", raw)
            return False
        return self.place(request) is not None

    def dropMime(self, mime_data: Optional[QMimeData], x: float, y: float) -> bool:
        payload_text = payload_from_mime(mime_data)
        if payload_text is None:
            return False
        return self.dropPayload(payload_text, x, y)

    @Slot(str, result=str)
    def paletteDragPayload(self, kind: str) -> str:
        activity = ActivityKind.parse(kind)
        return encode_palette_payload(activity) if activity else ""

    @Slot(int, result=str)
    def canvasDragPayload(self, node_id: int) -> str:
        node = self._nodes.get(node_id)
        return encode_canvas_payload(node) if node else ""

    # --- Connections --------------------------------------------------------
    @Slot(int)
    def onArmConnection(self, node_id: int) -> None:
        previous_state = self._connection.state
        self._connection.arm_start(node_id)
        self._flush_changes(previous_state)

    @Slot(float, float)
    def onPointerMoveOverSurface(self, x: float, y: float) -> None:
        if not self._connection.is_armed:
            return
        previous_state = self._connection.state
        self._connection.pointer_move(Point(*self._grid.clamp_point(x, y)))
        self._flush_changes(previous_state)

    @Slot()
    def onPointerLeaveSurface(self) -> None:
        previous_state = self._connection.state
        self._connection.pointer_leave_surface()
        self._flush_changes(previous_state)

    @Slot(int)
    def onNodeClicked(self, node_id: int) -> None:
        previous_state = self._connection.state
        self._connection.click_target(node_id)
        self._flush_changes(previous_state)

    @Slot()
    def cancelConnection(self) -> None:
        previous_state = self._connection.state
        self._connection.cancel()
        self._flush_changes(previous_state)

    @Slot(result="QVariant")
    def currentConnectionPreview(self) -> Dict[str, Any]:
        preview = self._connection.current_preview()
        if preview is None:
            return {}
        point = preview.preview_point
        return {
            "sourceId": preview.source_id,
            "hasPoint": point is not None,
            "x": point.x if point else 0.0,
            "y": point.y if point else 0.0,
        }

    # --- Queries ------------------------------------------------------------
    def listNodes(self) -> List[Node]:
        return [dataclasses.replace(node) for node in self._nodes.all()]

    def listEdges(self) -> List[Edge]:
        return self._edges.all()

    def getNode(self, node_id: int) -> Optional[Node]:
        node = self._nodes.get(node_id)
        return dataclasses.replace(node) if node else None

    def connectionPreview(self) -> Optional[ConnectionPreview]:
        return self._connection.current_preview()

    @Slot(float, float, result=int)
    def nodeIdAt(self, x: float, y: float) -> int:
        cell = self._grid.cell_at(x, y)
        if cell is None:
            return NO_NODE
        node = self._nodes.find_at(*cell)
        return node.id if node else NO_NODE

    @Slot(int, result="QVariant")
    def getNodeSnapshot(self, node_id: int) -> Dict[str, Any]:
        node = self._nodes.get(node_id)
        if not node:
            return {}
        return self._node_snapshot(node)

    # --- Utilities ----------------------------------------------------------
    @staticmethod
    def _preset(kind: ActivityKind) -> Dict[str, Any]:
        return ACTIVITY_PRESETS.get(kind, {})

    def _node_snapshot(self, node: Node) -> Dict[str, Any]:
        x, y = self._grid.cell_origin(node.col, node.row)
        return {
            "id": node.id,
            "kind": node.kind.value,
            "col": node.col,
            "row": node.row,
            "x": x,
            "y": y,
        }

    def _preview_point(self) -> Optional[Point]:
        preview = self._connection.current_preview()
        return preview.preview_point if preview else None

    def _preview_origin(self) -> tuple:
        source_id = self._connection.source_id
        node = self._nodes.get(source_id) if source_id is not None else None
        if node is None:
            return (0.0, 0.0)
        return self._grid.cell_center(node.col, node.row)
