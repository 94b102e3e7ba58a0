from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Any, Dict, List, Optional

import geopandas as gpd
from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError
from shapely.geometry import Polygon

from bboxpicker.constructs.bounds import MapBounds
from bboxpicker.utils.dateline import FULL_TURN, wrap_to_canonical
from bboxpicker.views.map_interface import MapCallback, MapEvent, MapViewInterface

log = logging.getLogger(__name__)

# every BoundsModel is in WGS84 degrees; the map defaults to Web Mercator meters
LATLON_CRS = CRS(4326)
XY_CRS = CRS(3857)


class Control:
    """An interactive map control that is either listening for user input or not."""

    def __init__(self, name: str):
        self.name = name
        self.active = False

    def activate(self):
        self.active = True

    def deactivate(self):
        self.active = False

    def __repr__(self):
        return f"Control(name={self.name}, active={self.active})"


class EditHandlesControl(Control):
    """
    The resize/move handles around a drawn box.

    The handles are attached to exactly one feature at a time. Once destroyed the
    control cannot be used again and must be replaced.
    """

    def __init__(self):
        super().__init__("edit_handles")
        self.feature: Optional[Polygon] = None
        self.destroyed = False

    def set_feature(self, feature: Polygon):
        if self.destroyed:
            raise RuntimeError("cannot attach a feature to a destroyed edit handles control")
        self.feature = feature
        self.activate()

    def destroy(self):
        self.deactivate()
        self.feature = None
        self.destroyed = True


class VectorLayerMapView(MapViewInterface):
    """
    An in-memory map view holding the drawn box as shapely polygons in a projected CRS.

    This view has no rendering of its own. It keeps the state a drawing library would
    keep (the vector layer, the drag control and the edit handles) so the controller
    can be embedded headlessly, scripted, or tested end to end.

    Rectangles are transformed with pyproj. Longitudes beyond +/-180 are projected past
    the edge of the world instead of wrapping, so a box crossing the date line stays a
    single contiguous rectangle, the same way a web map draws it.

    Args:
        crs: The projected CRS of the map units. Can be a pyproj.CRS object, an EPSG code
            as a string (e.g., 'EPSG:3857'), an integer EPSG code, or any CRS format that
            pyproj.CRS() accepts. Default is Web Mercator (EPSG:3857).

    Attributes:
        crs: The CRS of the map units
        features: The drawn box polygons, in map units
        drag_control: The control used to drag a new box
        edit_handles: The control used to move or resize the drawn box

    Raises:
        ValueError: If the crs cannot be parsed

    Examples:
        >>> map_view = VectorLayerMapView()
        >>> map_view.register(MapEvent.DRAG_COMPLETED, print)
        >>> # simulate the user dragging a box over Western Europe
        >>> raw = map_view.transform_to_map_crs(MapBounds(-10, 35, 20, 60))
        >>> map_view.drag(raw)
    """

    def __init__(self, crs: Any = XY_CRS):
        try:
            self.crs = CRS(crs)
        except ProjError as e:
            raise ValueError(f"Could not parse incoming `crs` parameter: {crs}") from e

        self._to_latlon = Transformer.from_crs(self.crs, LATLON_CRS, always_xy=True)
        self._to_map = Transformer.from_crs(LATLON_CRS, self.crs, always_xy=True)

        # width of one full turn of longitude in map units, at the equator
        west, _ = self._to_map.transform(-FULL_TURN / 4, 0)
        east, _ = self._to_map.transform(FULL_TURN / 4, 0)
        self._world_width = 2 * (east - west)

        # projections like Web Mercator cannot reach the poles
        area = self.crs.area_of_use
        self._min_lat = area.south if area else -90.0
        self._max_lat = area.north if area else 90.0

        self.features: List[Polygon] = []
        self.drag_control = Control("drag")
        self.drag_control.activate()
        self.edit_handles = EditHandlesControl()

        self._callbacks: Dict[MapEvent, List[MapCallback]] = defaultdict(list)

    def transform_to_display_crs(self, bounds: MapBounds) -> MapBounds:
        left, bottom = self._point_to_latlon(bounds.left, bounds.bottom)
        right, top = self._point_to_latlon(bounds.right, bounds.top)
        return MapBounds(left=left, bottom=bottom, right=right, top=top)

    def transform_to_map_crs(self, bounds: MapBounds) -> MapBounds:
        left, bottom = self._point_to_map(bounds.left, bounds.bottom)
        right, top = self._point_to_map(bounds.right, bounds.top)
        return MapBounds(left=left, bottom=bottom, right=right, top=top)

    def register(self, event: MapEvent, callback: MapCallback):
        if not isinstance(event, MapEvent):
            raise TypeError(f"unknown map event {event}")
        if not callable(callback):
            raise TypeError(f"callback for {event.name} must be callable")
        self._callbacks[event].append(callback)

    def draw_feature(self, bounds: MapBounds):
        feature = bounds.to_polygon()
        self.features.append(feature)
        self.edit_handles.set_feature(feature)

    def clear_features(self):
        self.features = []
        self.edit_handles.feature = None

    def activate_drag_control(self):
        self.drag_control.activate()

    def deactivate_drag_control(self):
        self.drag_control.deactivate()

    def recreate_edit_handles_control(self):
        self.edit_handles.destroy()
        self.edit_handles = EditHandlesControl()

    def deactivate_edit_handles_control(self):
        self.edit_handles.deactivate()

    def drag(self, bounds: MapBounds):
        """
        Simulate the user finishing a drag with the drag control.

        Args:
            bounds: The dragged rectangle in map units

        Raises:
            RuntimeError: If the drag control is not active
        """
        if not self.drag_control.active:
            raise RuntimeError("the drag control is not active; start a new drag first")
        self._fire(MapEvent.DRAG_COMPLETED, bounds)

    def transform(self, bounds: MapBounds):
        """
        Simulate the user moving or resizing the drawn box with the edit handles.

        The feature under the handles is replaced with the new rectangle before the
        event fires.

        Args:
            bounds: The edited rectangle in map units

        Raises:
            RuntimeError: If no feature is attached to active edit handles
        """
        if not self.edit_handles.active or self.edit_handles.feature is None:
            raise RuntimeError("there is no drawn box to transform")

        old = self.edit_handles.feature
        new = bounds.to_polygon()
        self.features = [new if f is old else f for f in self.features]
        self.edit_handles.feature = new

        self._fire(MapEvent.TRANSFORM_COMPLETED, bounds)

    def features_to_geodataframe(self) -> gpd.GeoDataFrame:
        """
        Convert the drawn features to a GeoDataFrame in the map CRS.

        Returns:
            A GeoDataFrame with one polygon row per drawn feature
        """
        return gpd.GeoDataFrame({"geometry": self.features}, crs=self.crs)

    def _fire(self, event: MapEvent, bounds: MapBounds):
        log.debug(f"{event.name} with {bounds}")
        for callback in self._callbacks[event]:
            callback(bounds)

    def _point_to_map(self, lon: float, lat: float):
        wrapped = wrap_to_canonical(lon)
        lat = min(max(lat, self._min_lat), self._max_lat)
        x, y = self._to_map.transform(wrapped, lat)
        turns = round((lon - wrapped) / FULL_TURN)
        x += turns * self._world_width

        if math.isinf(x) or math.isinf(y):
            raise ValueError(f"Unable to convert ({lon}, {lat}) -> {self.crs}")

        return x, y

    def _point_to_latlon(self, x: float, y: float):
        half = self._world_width / 2
        turns = math.floor((x + half) / self._world_width)
        lon, lat = self._to_latlon.transform(x - turns * self._world_width, y)
        return lon + turns * FULL_TURN, lat
