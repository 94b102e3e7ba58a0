from __future__ import annotations

import logging
from typing import Optional

from bboxpicker.constructs.bounds import (
    DEFAULT_PRECISION,
    BoundsModel,
    DisplayBounds,
    MapBounds,
    to_display,
)
from bboxpicker.controller.state import LifecycleState
from bboxpicker.validation import RawValue, Verdict, validate
from bboxpicker.views.form_interface import FormBindingInterface
from bboxpicker.views.map_interface import MapEvent, MapViewInterface

log = logging.getLogger(__name__)


class BoundingBoxController:
    """
    Keeps a dragged box on the map and the four typed coordinate fields in sync.

    The controller owns the only copy of the current box (a BoundsModel, or None) and
    the LifecycleState. It subscribes to the map's drag and edit events and to the
    form's commits when it is constructed, then answers each event synchronously:
    validate, build a new BoundsModel, and command the map and the form.

    Invalid input never raises; it produces a warning on the form and leaves the box
    and state untouched.

    Args:
        map_view: The map the box is drawn on
        form: The coordinate input fields
        precision: The number of decimals shown in the input fields. Default is 3.

    Attributes:
        state: The current LifecycleState
        bounds: The current box in degrees, or None if no box is drawn

    Examples:
        >>> from bboxpicker.views.vector_map import VectorLayerMapView
        >>> from bboxpicker.views.field_form import FieldFormBinding
        >>>
        >>> map_view = VectorLayerMapView()
        >>> form = FieldFormBinding()
        >>> controller = BoundingBoxController(map_view, form)
        >>>
        >>> # Type a box that crosses the date line
        >>> form.fill("10", "170", "-10", "-170")
        >>> form.submit()
        >>> controller.bounds.right_lon
        190.0
    """

    def __init__(
        self,
        map_view: MapViewInterface,
        form: FormBindingInterface,
        precision: int = DEFAULT_PRECISION,
    ):
        self.map_view = map_view
        self.form = form
        self.precision = precision

        self._state = LifecycleState.INIT
        self._bounds: Optional[BoundsModel] = None

        map_view.register(MapEvent.DRAG_COMPLETED, self.complete_drag)
        map_view.register(MapEvent.TRANSFORM_COMPLETED, self.complete_transform)
        form.register_commit(self.commit_input)

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def bounds(self) -> Optional[BoundsModel]:
        return self._bounds

    def display_bounds(self) -> Optional[DisplayBounds]:
        """
        Get the current box as it is shown in the input fields.

        Returns:
            The display projection of the current box, or None if no box is drawn
        """
        if self._bounds is None:
            return None

        return to_display(self._bounds, self.precision)

    def complete_drag(self, raw_bounds: MapBounds):
        """
        Accept a box the user just dragged on the map.

        Args:
            raw_bounds: The dragged rectangle in map units
        """
        log.debug(f"drag completed with {raw_bounds}")

        model = self._model_from_map(raw_bounds)
        if model is None:
            return

        self._draw(model)
        self.map_view.deactivate_drag_control()
        self._show(model)
        self.form.show_adjust_instruction(True)

        self._transition(LifecycleState.DRAGGED)

    def complete_transform(self, raw_bounds: MapBounds):
        """
        Accept a box the user moved or resized with the edit handles.

        The drawn feature already has the new shape, so only the model and the input
        fields are updated. The lifecycle state does not change.

        Args:
            raw_bounds: The edited rectangle in map units
        """
        log.debug(f"transform completed with {raw_bounds}")

        model = self._model_from_map(raw_bounds)
        if model is None:
            return

        self._bounds = model
        self._show(model)

    def start_new_drag(self):
        """
        Throw away the drawn box and let the user drag a new one.

        The lifecycle state is kept; it only changes on the next completed drag or
        accepted commit.
        """
        log.debug(f"starting a new drag from state {self._state.name}")

        self.map_view.recreate_edit_handles_control()
        self.map_view.clear_features()
        self.map_view.activate_drag_control()

        self.form.clear_display()
        self.form.show_adjust_instruction(False)

        self._bounds = None

    def commit_input(
        self,
        top_lat: RawValue,
        left_lon: RawValue,
        bottom_lat: RawValue,
        right_lon: RawValue,
    ):
        """
        Accept four values typed into the input fields.

        Before anything has been drawn, blank fields are expected while the user is
        still typing and are ignored without a warning. Afterwards a blank field shows
        the "fields empty" warning.

        Args:
            top_lat: The raw northern latitude field
            left_lon: The raw western longitude field
            bottom_lat: The raw southern latitude field
            right_lon: The raw eastern longitude field
        """
        log.debug(
            f"input committed: {top_lat}, {left_lon}, {bottom_lat}, {right_lon} "
            f"in state {self._state.name}"
        )

        verdict = validate(
            top_lat,
            left_lon,
            bottom_lat,
            right_lon,
            allow_blank=self._state is LifecycleState.INIT,
        )
        if not verdict.ok:
            self._warn(verdict)
            return

        model = BoundsModel.from_inputs(*verdict.values)
        if model.crosses_date_line:
            log.debug(f"typed box crosses the date line at right_lon={model.right_lon}")

        if self._state is LifecycleState.INIT:
            self._draw(model)
            self.map_view.deactivate_drag_control()
            self._transition(LifecycleState.DRAWN_FROM_INPUT)
        elif self._state is LifecycleState.DRAWN_FROM_INPUT:
            self.map_view.clear_features()
            self._draw(model)
        else:
            # re-arm the controls the same way a fresh drag would
            self.map_view.activate_drag_control()
            self.map_view.deactivate_edit_handles_control()
            self.map_view.clear_features()
            self._draw(model)
            self.map_view.deactivate_drag_control()

        self.form.show_adjust_instruction(True)
        self.form.set_warning("")

    def _model_from_map(self, raw_bounds: MapBounds) -> Optional[BoundsModel]:
        degrees = self.map_view.transform_to_display_crs(raw_bounds)

        verdict = validate(degrees.top, degrees.left, degrees.bottom, degrees.right)
        if not verdict.ok:
            self._warn(verdict)
            return None

        return BoundsModel.from_map_bounds(degrees)

    def _draw(self, model: BoundsModel):
        self._bounds = model
        self.map_view.draw_feature(
            self.map_view.transform_to_map_crs(model.to_map_bounds())
        )

    def _show(self, model: BoundsModel):
        self.form.display_bounds(*to_display(model, self.precision))

    def _warn(self, verdict: Verdict):
        log.info(f"bounds rejected: {verdict.rejection.name}")
        if not verdict.silent:
            self.form.set_warning(verdict.rejection.message)

    def _transition(self, new_state: LifecycleState):
        if new_state is not self._state:
            log.debug(f"state {self._state.name} -> {new_state.name}")
        self._state = new_state
