from __future__ import annotations

from abc import ABCMeta, abstractmethod
from enum import Enum
from typing import Callable

from bboxpicker.constructs.bounds import MapBounds

MapCallback = Callable[[MapBounds], None]


class MapEvent(Enum):
    """
    Events raised by a map view, each delivering a rectangle in map units.

    - DRAG_COMPLETED: the user finished dragging a new box with the drag control
    - TRANSFORM_COMPLETED: the user finished moving or resizing a drawn box with the
      edit handles
    """

    DRAG_COMPLETED = "drag_completed"
    TRANSFORM_COMPLETED = "transform_completed"


class MapViewInterface(metaclass=ABCMeta):
    """
    Abstract base class for the map a bounding box is drawn on.

    The map owns rendering, the interactive controls and the projection between map
    units and degrees. The BoundingBoxController only talks to the map through this
    interface, so any drawing backend can be plugged in.

    Subclasses must implement methods for:
    - Transforming rectangles between map units and degrees (EPSG:4326)
    - Registering callbacks for map events
    - Drawing and clearing the box feature
    - Activating and deactivating the drag and edit-handles controls
    """

    @abstractmethod
    def transform_to_display_crs(self, bounds: MapBounds) -> MapBounds:
        """
        Transform a rectangle from map units to degrees.

        Args:
            bounds: The rectangle in map units

        Returns:
            The rectangle in degrees (EPSG:4326)
        """

    @abstractmethod
    def transform_to_map_crs(self, bounds: MapBounds) -> MapBounds:
        """
        Transform a rectangle from degrees to map units.

        Longitudes beyond +/-180 (a box crossing the date line) must map past the
        edge of the world rather than wrap, so the rectangle stays contiguous.

        Args:
            bounds: The rectangle in degrees (EPSG:4326)

        Returns:
            The rectangle in map units
        """

    @abstractmethod
    def register(self, event: MapEvent, callback: MapCallback):
        """
        Subscribe a callback to a map event.

        Args:
            event: The event to listen for
            callback: Called with the event's rectangle in map units
        """

    @abstractmethod
    def draw_feature(self, bounds: MapBounds):
        """
        Draw the box and attach the edit handles to it.

        Args:
            bounds: The rectangle in map units
        """

    @abstractmethod
    def clear_features(self):
        """Remove every drawn feature."""

    @abstractmethod
    def activate_drag_control(self):
        """Let the user drag a new box on the map."""

    @abstractmethod
    def deactivate_drag_control(self):
        """Stop the drag control from starting a new box."""

    @abstractmethod
    def recreate_edit_handles_control(self):
        """
        Discard the edit-handles control and build a fresh one.

        A handles control whose box collapsed to a line cannot be reused, so a new drag
        always starts with a new control.
        """

    @abstractmethod
    def deactivate_edit_handles_control(self):
        """Hide the edit handles around the drawn box."""
