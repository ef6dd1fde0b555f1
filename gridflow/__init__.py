"""GridFlow activity diagram editor built with PySide6 and QML.

Activities are placed on a uniform grid and wired together with a
click-to-connect workflow. The editing core (stores and controllers) is
plain Python; ``DiagramModel`` adapts one editing session to Qt.
"""

from .connection import ConnectionController
from .constants import ACTIVITY_PRESETS, CELL_SIZE, DRAG_MIME_TYPE, NODE_SIZE, SURFACE_PX
from .grid import GridConfig
from .model import DiagramModel
from .placement import PlacementController
from .stores import EdgeStore, NodeStore, NodeStoreObserver
from .types import (
    IDLE,
    ActivityKind,
    Armed,
    ConnectionPreview,
    Edge,
    FromCanvas,
    FromPalette,
    Idle,
    Node,
    PlacementResult,
    Point,
)
from .ui import create_gridflow_window, main

__all__ = [
    "ACTIVITY_PRESETS",
    "CELL_SIZE",
    "DRAG_MIME_TYPE",
    "IDLE",
    "NODE_SIZE",
    "SURFACE_PX",
    "ActivityKind",
    "Armed",
    "ConnectionController",
    "ConnectionPreview",
    "DiagramModel",
    "Edge",
    "EdgeStore",
    "FromCanvas",
    "FromPalette",
    "GridConfig",
    "Idle",
    "Node",
    "NodeStore",
    "NodeStoreObserver",
    "PlacementController",
    "PlacementResult",
    "Point",
    "create_gridflow_window",
    "main",
]
