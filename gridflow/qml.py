"""QML UI definition for GridFlow."""

from __future__ import annotations

from pathlib import Path

QML_DIR = Path(__file__).with_name("qml_ui")
GRIDFLOW_QML_PATH = QML_DIR / "GridFlowWindow.qml"


__all__ = [
    "GRIDFLOW_QML_PATH",
    "QML_DIR",
]
