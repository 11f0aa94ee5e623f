import os
import pathlib
import sys
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

# Run Qt without a display when none is available
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Ensure project root is in sys.path
repo_root = pathlib.Path(__file__).parent.parent
sys.path.insert(0, str(repo_root))

from PySide6.QtWidgets import QApplication  # noqa: E402

from geoshape.core.geo_point import GeoPoint  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """
    Ensure QApplication is instantiated only once.
    """
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@dataclass(eq=False)
class FakeMarker:
    """
    In-memory marker handle. Compared by identity like real handles.
    """

    position: GeoPoint
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    visible: bool = True
    z_index: Optional[float] = None


@dataclass(eq=False)
class FakeFacade:
    """
    In-memory rendered overlay recording what the surface was asked to draw.
    """

    kind: str
    points: List[GeoPoint]
    holes: List[List[GeoPoint]] = field(default_factory=list)
    visible: bool = True
    z_index: Optional[float] = None
    update_count: int = 0


class FakeSurface:
    """
    Recording RenderSurface for testing the editing core without a GUI.
    """

    def __init__(self):
        self.markers: List[FakeMarker] = []
        self.facades: List[FakeFacade] = []
        self.removed_markers: List[FakeMarker] = []
        self.removed_facades: List[FakeFacade] = []

    def marker(self, latitude: float, longitude: float) -> FakeMarker:
        """Shortcut for create_marker from plain coordinates."""
        return self.create_marker(GeoPoint(latitude, longitude))

    def create_marker(self, position: GeoPoint) -> FakeMarker:
        marker = FakeMarker(position)
        self.markers.append(marker)
        return marker

    def remove_marker(self, handle: FakeMarker) -> None:
        self.removed_markers.append(handle)
        self.markers = [m for m in self.markers if m is not handle]

    def set_marker_visible(self, handle: FakeMarker, visible: bool) -> None:
        handle.visible = visible

    def set_marker_z_index(self, handle: FakeMarker, z_index: float) -> None:
        handle.z_index = z_index

    def create_polyline(self, points) -> FakeFacade:
        facade = FakeFacade("polyline", list(points))
        self.facades.append(facade)
        return facade

    def create_polygon(self, points, holes) -> FakeFacade:
        facade = FakeFacade("polygon", list(points), [list(h) for h in holes])
        self.facades.append(facade)
        return facade

    def update_facade(self, facade: FakeFacade, points, holes=None) -> None:
        facade.points = list(points)
        facade.holes = [list(h) for h in holes or []]
        facade.update_count += 1

    def remove_facade(self, facade: FakeFacade) -> None:
        self.removed_facades.append(facade)
        self.facades = [f for f in self.facades if f is not facade]

    def set_facade_visible(self, facade: FakeFacade, visible: bool) -> None:
        facade.visible = visible

    def set_facade_z_index(self, facade: FakeFacade, z_index: float) -> None:
        facade.z_index = z_index


@pytest.fixture
def surface():
    """
    Provides a fresh recording surface for each test.
    """
    return FakeSurface()
