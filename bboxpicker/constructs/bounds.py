from __future__ import annotations

import json
from dataclasses import dataclass
from typing import NamedTuple

from shapely.geometry import Polygon, box, mapping

from bboxpicker.utils.dateline import (
    MAX_LONGITUDE,
    adjust_for_date_line,
    is_valid_latitude,
    wrap_to_canonical,
)

DEFAULT_PRECISION = 3


class MapBounds(NamedTuple):
    """
    An axis-aligned rectangle given by its four edges.

    MapBounds carries no CRS; the edges are in whatever units the caller is working in,
    map units (e.g. Web Mercator meters) when coming from the map and degrees after a
    transform to the display CRS.

    Attributes:
        left: The minimum x (western edge)
        bottom: The minimum y (southern edge)
        right: The maximum x (eastern edge)
        top: The maximum y (northern edge)
    """

    left: float
    bottom: float
    right: float
    top: float

    def to_polygon(self) -> Polygon:
        return box(self.left, self.bottom, self.right, self.top)

    @classmethod
    def from_polygon(cls, polygon: Polygon) -> MapBounds:
        minx, miny, maxx, maxy = polygon.bounds
        return cls(left=minx, bottom=miny, right=maxx, top=maxy)


class DisplayBounds(NamedTuple):
    """The four box edges formatted as fixed-point strings for the input fields."""

    top_lat: str
    left_lon: str
    bottom_lat: str
    right_lon: str


@dataclass(frozen=True)
class BoundsModel:
    """
    The authoritative bounding box, in degrees (EPSG:4326).

    A BoundsModel is immutable. The controller replaces it wholesale on every valid
    drag, edit or typed commit.

    The right longitude may exceed 180 when the box crosses the antimeridian; for
    example a box from 170 to -170 is stored with left_lon=170 and right_lon=190.
    Longitudes are only wrapped into [-180, 180] by the display projection.

    Attributes:
        top_lat: The northern latitude, in [-90, 90]
        left_lon: The western longitude
        bottom_lat: The southern latitude, in [-90, 90]
        right_lon: The eastern longitude, possibly beyond 180

    Raises:
        ValueError: If the latitudes are equal, the longitudes are equal, or a latitude
            is outside [-90, 90]

    Examples:
        >>> model = BoundsModel.from_inputs(10, 170, -10, -170)
        >>> model.right_lon
        190.0
        >>> to_display(model)
        DisplayBounds(top_lat='10.000', left_lon='170.000', bottom_lat='-10.000', right_lon='-170.000')
    """

    top_lat: float
    left_lon: float
    bottom_lat: float
    right_lon: float

    def __post_init__(self):
        if self.top_lat == self.bottom_lat:
            raise ValueError(
                f"top and bottom latitude must differ but both are {self.top_lat}"
            )
        if self.left_lon == self.right_lon:
            raise ValueError(
                f"left and right longitude must differ but both are {self.left_lon}"
            )
        for lat in (self.top_lat, self.bottom_lat):
            if not is_valid_latitude(lat):
                raise ValueError(f"latitude {lat} is outside of [-90, 90]")

    @classmethod
    def from_inputs(
        cls, top_lat: float, left_lon: float, bottom_lat: float, right_lon: float
    ) -> BoundsModel:
        """
        Build a box from typed field values, adjusting for a date line crossing.

        Args:
            top_lat: The northern latitude in degrees
            left_lon: The western longitude in degrees
            bottom_lat: The southern latitude in degrees
            right_lon: The eastern longitude in degrees; shifted by 360 when it is less
                than left_lon

        Returns:
            A new BoundsModel
        """
        return cls(
            top_lat=float(top_lat),
            left_lon=float(left_lon),
            bottom_lat=float(bottom_lat),
            right_lon=float(adjust_for_date_line(left_lon, right_lon)),
        )

    @classmethod
    def from_map_bounds(cls, bounds: MapBounds) -> BoundsModel:
        """
        Build a box from a rectangle that is already in degrees.

        Dragged rectangles are simple rectangles in the map projection, so no date line
        adjustment is applied.
        """
        return cls(
            top_lat=bounds.top,
            left_lon=bounds.left,
            bottom_lat=bounds.bottom,
            right_lon=bounds.right,
        )

    @property
    def crosses_date_line(self) -> bool:
        return self.right_lon > MAX_LONGITUDE

    def to_map_bounds(self) -> MapBounds:
        return MapBounds(
            left=self.left_lon,
            bottom=self.bottom_lat,
            right=self.right_lon,
            top=self.top_lat,
        )

    def to_polygon(self) -> Polygon:
        return self.to_map_bounds().to_polygon()

    def to_geojson(self) -> str:
        """
        Convert the box to a GeoJSON polygon string.

        Longitudes are written as stored, so a box crossing the date line keeps its
        right edge beyond 180 and stays a single contiguous ring.

        Returns:
            A GeoJSON string representation of the box polygon
        """
        return json.dumps(mapping(self.to_polygon()))


def to_display(model: BoundsModel, precision: int = DEFAULT_PRECISION) -> DisplayBounds:
    """
    Project a box into the fixed-point strings shown in the input fields.

    Longitudes are wrapped into [-180, 180] before formatting; latitudes are never
    wrapped.

    Args:
        model: The box to display
        precision: The number of decimals to format each value with. Default is 3.

    Returns:
        A DisplayBounds of formatted strings
    """

    def fmt(value: float) -> str:
        return f"{value:.{precision}f}"

    return DisplayBounds(
        top_lat=fmt(model.top_lat),
        left_lon=fmt(wrap_to_canonical(model.left_lon)),
        bottom_lat=fmt(model.bottom_lat),
        right_lon=fmt(wrap_to_canonical(model.right_lon)),
    )
