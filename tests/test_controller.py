from unittest import TestCase
from unittest.mock import Mock

from bboxpicker.constructs.bounds import BoundsModel, MapBounds
from bboxpicker.controller.bounding_box import BoundingBoxController
from bboxpicker.controller.state import LifecycleState
from bboxpicker.validation import Rejection
from bboxpicker.views.form_interface import FormBindingInterface
from bboxpicker.views.map_interface import MapEvent, MapViewInterface


def map_calls(map_view):
    """Names of the commands sent to the map, ignoring projection lookups"""
    return [
        name
        for name, _, _ in map_view.method_calls
        if not name.startswith("transform_")
    ]


class TestBoundingBoxController(TestCase):
    """Drive the controller with mocked map and form collaborators"""

    def setUp(self):
        # identity projections so map units are degrees
        self.map_view = Mock(spec=MapViewInterface)
        self.map_view.transform_to_display_crs.side_effect = lambda b: b
        self.map_view.transform_to_map_crs.side_effect = lambda b: b

        self.form = Mock(spec=FormBindingInterface)

        self.controller = BoundingBoxController(self.map_view, self.form)

    def reset_mocks(self):
        self.map_view.reset_mock()
        self.form.reset_mock()

    def test_starts_in_init_without_bounds(self):
        self.assertEqual(self.controller.state, LifecycleState.INIT)
        self.assertIsNone(self.controller.bounds)
        self.assertIsNone(self.controller.display_bounds())

    def test_registers_handlers(self):
        self.map_view.register.assert_any_call(
            MapEvent.DRAG_COMPLETED, self.controller.complete_drag
        )
        self.map_view.register.assert_any_call(
            MapEvent.TRANSFORM_COMPLETED, self.controller.complete_transform
        )
        self.form.register_commit.assert_called_once_with(self.controller.commit_input)

    def test_commit_from_init(self):
        """Typing a box before anything is drawn draws it and moves to DRAWN_FROM_INPUT"""
        self.controller.commit_input("10", "-20", "-5", "30")

        self.assertEqual(self.controller.state, LifecycleState.DRAWN_FROM_INPUT)
        self.map_view.draw_feature.assert_called_once_with(
            MapBounds(left=-20, bottom=-5, right=30, top=10)
        )
        self.map_view.deactivate_drag_control.assert_called_once()
        self.form.set_warning.assert_called_once_with("")
        self.assertEqual(
            self.controller.bounds,
            BoundsModel(top_lat=10, left_lon=-20, bottom_lat=-5, right_lon=30),
        )

    def test_commit_from_init_with_blank_fields_is_silent(self):
        self.controller.commit_input("10", "", "", "")

        self.assertEqual(self.controller.state, LifecycleState.INIT)
        self.form.set_warning.assert_not_called()
        self.map_view.draw_feature.assert_not_called()

    def test_commit_from_init_with_same_latitude_warns(self):
        self.controller.commit_input("10", "0", "10", "5")

        self.assertEqual(self.controller.state, LifecycleState.INIT)
        self.form.set_warning.assert_called_once_with(Rejection.SAME_LATITUDE.message)
        self.map_view.draw_feature.assert_not_called()

    def test_commit_crossing_date_line(self):
        self.controller.commit_input("10", "170", "-10", "-170")

        self.map_view.draw_feature.assert_called_once_with(
            MapBounds(left=170, bottom=-10, right=190, top=10)
        )
        self.assertEqual(self.controller.bounds.right_lon, 190)
        self.assertEqual(self.controller.display_bounds().right_lon, "-170.000")

    def test_drag_from_init(self):
        """A completed drag is drawn, shown in the form and moves to DRAGGED"""
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.form.display_bounds.assert_called_once_with(
            "45.000", "10.000", "20.000", "50.000"
        )
        self.map_view.draw_feature.assert_called_once_with(
            MapBounds(left=10, bottom=20, right=50, top=45)
        )
        self.map_view.deactivate_drag_control.assert_called_once()
        self.form.show_adjust_instruction.assert_called_with(True)

    def test_drag_wraps_displayed_longitudes(self):
        self.controller.complete_drag(MapBounds(left=170, bottom=-10, right=200, top=10))

        self.form.display_bounds.assert_called_once_with(
            "10.000", "170.000", "-10.000", "-160.000"
        )
        self.assertEqual(self.controller.bounds.right_lon, 200)

    def test_collapsed_drag_is_rejected(self):
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=10, top=45))

        self.assertEqual(self.controller.state, LifecycleState.INIT)
        self.assertIsNone(self.controller.bounds)
        self.form.set_warning.assert_called_once_with(Rejection.SAME_LONGITUDE.message)
        self.map_view.draw_feature.assert_not_called()

    def test_start_new_drag_after_drag(self):
        """Starting a new drag clears the map and form but keeps the state"""
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        self.reset_mocks()

        self.controller.start_new_drag()

        self.form.clear_display.assert_called_once()
        self.form.show_adjust_instruction.assert_called_once_with(False)
        self.map_view.activate_drag_control.assert_called_once()
        self.map_view.clear_features.assert_called_once()
        self.assertEqual(
            map_calls(self.map_view),
            [
                "recreate_edit_handles_control",
                "clear_features",
                "activate_drag_control",
            ],
        )
        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.assertIsNone(self.controller.bounds)

    def test_blank_commit_when_drawn_from_input(self):
        self.controller.commit_input("10", "-20", "-5", "30")
        before = self.controller.bounds
        self.reset_mocks()

        self.controller.commit_input("10", "", "-5", "30")

        self.assertEqual(self.controller.state, LifecycleState.DRAWN_FROM_INPUT)
        self.assertEqual(self.controller.bounds, before)
        self.form.set_warning.assert_called_once_with(Rejection.FIELDS_EMPTY.message)
        self.map_view.draw_feature.assert_not_called()

    def test_blank_commit_when_dragged(self):
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        self.reset_mocks()

        self.controller.commit_input("", "", "", "")

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.form.set_warning.assert_called_once_with(Rejection.FIELDS_EMPTY.message)
        self.assertEqual(map_calls(self.map_view), [])

    def test_commit_when_drawn_from_input_redraws(self):
        self.controller.commit_input("10", "-20", "-5", "30")
        self.reset_mocks()

        self.controller.commit_input("20", "-20", "-5", "30")

        self.assertEqual(self.controller.state, LifecycleState.DRAWN_FROM_INPUT)
        self.assertEqual(map_calls(self.map_view), ["clear_features", "draw_feature"])
        self.assertEqual(self.controller.bounds.top_lat, 20)
        self.form.set_warning.assert_called_once_with("")

    def test_commit_when_dragged_rearms_controls(self):
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        self.reset_mocks()

        self.controller.commit_input("10", "-20", "-5", "30")

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.assertEqual(
            map_calls(self.map_view),
            [
                "activate_drag_control",
                "deactivate_edit_handles_control",
                "clear_features",
                "draw_feature",
                "deactivate_drag_control",
            ],
        )
        self.form.set_warning.assert_called_once_with("")

    def test_commit_twice_when_dragged_is_idempotent(self):
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        self.reset_mocks()

        self.controller.commit_input("10", "-20", "-5", "30")
        first = self.controller.bounds
        self.controller.commit_input("10", "-20", "-5", "30")

        draws = self.map_view.draw_feature.call_args_list
        self.assertEqual(len(draws), 2)
        self.assertEqual(draws[0], draws[1])
        self.assertEqual(self.controller.bounds, first)
        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)

    def test_out_of_range_commit_keeps_model(self):
        self.controller.commit_input("10", "-20", "-5", "30")
        before = self.controller.bounds
        self.reset_mocks()

        self.controller.commit_input("95", "-20", "-5", "30")

        self.assertEqual(self.controller.bounds, before)
        self.form.set_warning.assert_called_once_with(
            Rejection.LATITUDE_OUT_OF_RANGE.message
        )

    def test_drag_after_commit_moves_to_dragged(self):
        self.controller.commit_input("10", "-20", "-5", "30")
        self.controller.start_new_drag()
        self.assertEqual(self.controller.state, LifecycleState.DRAWN_FROM_INPUT)

        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)

    def test_transform_updates_model_and_form(self):
        """Editing the drawn box with the handles updates the fields, not the state"""
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        self.reset_mocks()

        self.controller.complete_transform(MapBounds(left=5, bottom=1, right=15, top=8))

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.assertEqual(
            self.controller.bounds,
            BoundsModel(top_lat=8, left_lon=5, bottom_lat=1, right_lon=15),
        )
        self.form.display_bounds.assert_called_once_with(
            "8.000", "5.000", "1.000", "15.000"
        )
        self.map_view.draw_feature.assert_not_called()

    def test_collapsed_transform_is_ignored(self):
        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        before = self.controller.bounds
        self.reset_mocks()

        self.controller.complete_transform(MapBounds(left=5, bottom=8, right=15, top=8))

        self.assertEqual(self.controller.bounds, before)
        self.form.set_warning.assert_called_once_with(Rejection.SAME_LATITUDE.message)
        self.form.display_bounds.assert_not_called()

    def test_precision(self):
        controller = BoundingBoxController(self.map_view, self.form, precision=1)
        controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))

        self.form.display_bounds.assert_called_with("45.0", "10.0", "20.0", "50.0")

    def test_full_turn_wide_commit_warns_in_every_state(self):
        """A box whose edges meet after the date line shift warns instead of raising"""
        for fields in [("10", "180", "-10", "-180"), ("10", "200", "-10", "-160")]:
            self.controller.commit_input(*fields)
            self.assertEqual(self.controller.state, LifecycleState.INIT)
            self.form.set_warning.assert_called_with(Rejection.SAME_LONGITUDE.message)

        self.controller.commit_input("10", "-20", "-5", "30")
        before = self.controller.bounds
        self.controller.commit_input("10", "180", "-10", "-180")
        self.assertEqual(self.controller.bounds, before)

        self.controller.complete_drag(MapBounds(left=10, bottom=20, right=50, top=45))
        before = self.controller.bounds
        self.reset_mocks()
        self.controller.commit_input("10", "200", "-10", "-160")

        self.assertEqual(self.controller.state, LifecycleState.DRAGGED)
        self.assertEqual(self.controller.bounds, before)
        self.form.set_warning.assert_called_once_with(Rejection.SAME_LONGITUDE.message)
        self.map_view.draw_feature.assert_not_called()
