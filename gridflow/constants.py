"""Constants and presets for GridFlow diagrams."""

from typing import Any, Dict

from .types import ActivityKind


DRAG_MIME_TYPE = "application/json"

CELL_SIZE = 100
NODE_SIZE = 50
SURFACE_PX = 2000

PALETTE_SOURCE = "palette"
CANVAS_SOURCE = "canvas"

# Node ids are 1-based so that 0 never reads as a valid id in QML checks.
FIRST_NODE_ID = 1
NO_NODE = -1


ACTIVITY_PRESETS: Dict[ActivityKind, Dict[str, Any]] = {
    ActivityKind.START: {
        "label": "Start",
        "emoji": "\U0001F7E2",
    },
    ActivityKind.STOP: {
        "label": "Stop",
        "emoji": "\U0001F534",
    },
    ActivityKind.SEQUENCE: {
        "label": "Sequence",
        "emoji": "\U0001F517",
    },
    ActivityKind.RECV: {
        "label": "Recv",
        "emoji": "\U0001F4E5",
    },
}

UNKNOWN_EMOJI = "❓"
