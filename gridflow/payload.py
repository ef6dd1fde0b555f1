"""Drag payload encoding for palette tiles and canvas nodes.

Drag sources write a small JSON object; the drop target decodes it into a
:data:`~gridflow.types.PlacementRequest`. Anything that does not decode
cleanly is treated as a stray drop and yields None.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from PySide6.QtCore import QByteArray, QMimeData

from .constants import CANVAS_SOURCE, DRAG_MIME_TYPE, PALETTE_SOURCE
from .grid import is_grid_index
from .types import ActivityKind, FromCanvas, FromPalette, Node, PlacementRequest


def encode_palette_payload(kind: ActivityKind) -> str:
    return json.dumps({"source": PALETTE_SOURCE, "type": kind.value})


def encode_canvas_payload(node: Node) -> str:
    return json.dumps({"source": CANVAS_SOURCE, "id": node.id, "type": node.kind.value})


def _parse(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return payload


def decode_drop_payload(raw: Any, col: int, row: int) -> Optional[PlacementRequest]:
    """Turn a dropped payload plus its target cell into a placement request."""
    payload = _parse(raw)
    if payload is None:
        return None

    source = payload.get("source")
    if source == PALETTE_SOURCE:
        kind = ActivityKind.parse(payload.get("type"))
        if kind is None:
            return None
        return FromPalette(kind, col, row)
    if source == CANVAS_SOURCE:
        node_id = payload.get("id")
        if not is_grid_index(node_id):
            return None
        return FromCanvas(node_id, col, row)
    return None


def payload_to_mime(payload_text: str) -> QMimeData:
    mime_data = QMimeData()
    mime_data.setData(DRAG_MIME_TYPE, QByteArray(payload_text.encode("utf-8")))
    mime_data.setText(payload_text)
    return mime_data


def payload_from_mime(mime_data: Optional[QMimeData]) -> Optional[str]:
    """Extract the payload text from drag MIME data, or None."""
    if mime_data is None:
        return None
    payload_text: Optional[str] = None
    if mime_data.hasFormat(DRAG_MIME_TYPE):
        raw = mime_data.data(DRAG_MIME_TYPE)
        try:
            payload_text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return None
    elif mime_data.hasText():
        payload_text = mime_data.text()
    return payload_text or None
