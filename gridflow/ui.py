"""UI creation functions for GridFlow."""

from __future__ import annotations

import logging
import os
import sys

from PySide6.QtCore import QUrl
from PySide6.QtQml import QQmlApplicationEngine

from .grid import GridConfig
from .logging_config import setup_logging
from .model import DiagramModel
from .qml import GRIDFLOW_QML_PATH, QML_DIR

logger = logging.getLogger(__name__)


def create_gridflow_window(diagram_model: DiagramModel) -> QQmlApplicationEngine:
    """Create and return a QQmlApplicationEngine hosting the GridFlow UI."""
    engine = QQmlApplicationEngine()
    engine.rootContext().setContextProperty("diagramModel", diagram_model)
    engine.addImportPath(str(QML_DIR))
    engine.load(QUrl.fromLocalFile(str(GRIDFLOW_QML_PATH)))
    return engine


def main() -> int:
    """Main entry point for the GridFlow editor."""
    from PySide6.QtWidgets import QApplication

    smoke_mode = "--smoke" in sys.argv or os.environ.get("GRIDFLOW_SMOKE") == "1"
    debug_mode = "--debug" in sys.argv
    setup_logging(logging.DEBUG if debug_mode else logging.INFO)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)

    grid = GridConfig.from_env()
    diagram_model = DiagramModel(grid)
    engine = create_gridflow_window(diagram_model)
    if not engine.rootObjects():
        logger.error("Failed to load %s", GRIDFLOW_QML_PATH)
        return 1

    if smoke_mode:
        return 0

    logger.info("GridFlow started with a %dx%d grid", grid.columns, grid.rows)
    engine.rootObjects()[0].showWindow()
    return app.exec()
