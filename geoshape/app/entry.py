"""
Application Entry Point.

This module contains the main() function of the shape editor: it parses the
command line, configures logging, and opens a window with the editable map
scene. Separated from the editing logic to allow for easier testing.
"""

import argparse
import json
import sys
from typing import List, Optional

from PySide6.QtGui import QAction, QPainter
from PySide6.QtWidgets import QApplication, QGraphicsView, QMainWindow

from geoshape.app.shape_edit_handler import ShapeEditHandler
from geoshape.core.editor_config import EditorConfig
from geoshape.core.logging_config import (
    get_logger,
    set_edit_tracing,
    setup_logging,
    shutdown_logging,
)
from geoshape.core.map_shape import MapShapeType
from geoshape.gui.widgets.map import MapShapeScene

logger = get_logger(__name__)

# Shapes offered in the toolbar
DRAWABLE_SHAPES = [
    ("Point", MapShapeType.POINT),
    ("Line", MapShapeType.POLYLINE),
    ("Polygon", MapShapeType.POLYGON),
]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses the command line.

    Args:
        argv: Arguments without the program name, sys.argv if omitted.

    Returns:
        argparse.Namespace: Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        description="Edit map vector shapes by dragging their vertices."
    )
    parser.add_argument(
        "geojson", nargs="?", help="GeoJSON file with a geometry to edit"
    )
    parser.add_argument("--config", help="JSON file with editor settings")
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--trace-edits",
        action="store_true",
        help="Log every marker and shape edit",
    )
    return parser.parse_args(argv)


def load_config(path: Optional[str]) -> EditorConfig:
    """
    Loads editor settings from a JSON file.

    Args:
        path: Settings file, or None for the defaults.

    Returns:
        EditorConfig: The settings.
    """
    if path is None:
        return EditorConfig()
    with open(path, "r", encoding="utf-8") as f:
        return EditorConfig.from_dict(json.load(f))


def load_geometry(path: str) -> dict:
    """
    Reads a GeoJSON geometry, unwrapping a Feature if needed.

    Args:
        path: GeoJSON file.

    Returns:
        dict: The geometry object.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if data.get("type") == "Feature":
        return data["geometry"]
    return data


class EditorWindow(QMainWindow):
    """
    Main window hosting the map scene and the drawing toolbar.
    """

    def __init__(self, config: EditorConfig) -> None:
        super().__init__()
        self.setWindowTitle("Shape Editor")
        self.resize(1200, 800)

        self.scene = MapShapeScene(parent=self)
        self.view = QGraphicsView(self.scene)
        self.view.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setCentralWidget(self.view)

        self.handler = ShapeEditHandler(self.scene, config=config)
        self._setup_toolbar()

    def _setup_toolbar(self) -> None:
        toolbar = self.addToolBar("Draw")
        for label, shape_type in DRAWABLE_SHAPES:
            action = QAction(label, self)
            action.triggered.connect(
                lambda checked=False, t=shape_type: self.handler.begin_shape(t)
            )
            toolbar.addAction(action)

        hole_action = QAction("Hole", self)
        hole_action.triggered.connect(self._begin_hole)
        toolbar.addAction(hole_action)

        finish_action = QAction("Finish", self)
        finish_action.triggered.connect(self._finish_shape)
        toolbar.addAction(finish_action)

    def _begin_hole(self) -> None:
        try:
            self.handler.begin_hole()
        except (RuntimeError, NotImplementedError) as e:
            self.statusBar().showMessage(str(e), 3000)

    def _finish_shape(self) -> None:
        geometry = self.handler.finish_shape()
        if geometry is None:
            self.statusBar().showMessage("Shape is not complete yet", 3000)
            return
        logger.info(f"Finished shape: {json.dumps(geometry)}")
        self.statusBar().showMessage(f"Finished {geometry['type']}", 3000)


def main(argv: Optional[List[str]] = None) -> None:
    """Application entry point."""
    args = parse_args(argv)
    config = load_config(args.config)
    setup_logging(debug_mode=args.debug or config.debug_mode, log_dir=config.log_dir)
    set_edit_tracing(args.trace_edits)

    try:
        logger.info("Starting Shape Editor...")
        app = QApplication.instance() or QApplication(sys.argv)

        window = EditorWindow(config)
        if args.geojson:
            window.handler.load_geometry(load_geometry(args.geojson))
        window.show()

        logger.info("Entering Event Loop...")
        exit_code = app.exec()
    except Exception:
        logger.exception("CRITICAL: Unhandled exception in main application loop")
        exit_code = 1
    finally:
        shutdown_logging()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
