from __future__ import annotations

from typing import List

from bboxpicker.views.form_interface import CommitCallback, FormBindingInterface


class FieldFormBinding(FormBindingInterface):
    """
    An in-memory form with four editable coordinate fields and a warning line.

    Attributes:
        top_lat: The northern latitude field
        left_lon: The western longitude field
        bottom_lat: The southern latitude field
        right_lon: The eastern longitude field
        warning: The current warning text, empty when there is none
        adjust_instruction_visible: Whether the "adjust the box" hint is shown

    Examples:
        >>> form = FieldFormBinding()
        >>> form.fill("45", "10", "20", "50")
        >>> form.submit()  # hands the four strings to every registered callback
    """

    def __init__(self):
        self.top_lat = ""
        self.left_lon = ""
        self.bottom_lat = ""
        self.right_lon = ""
        self.warning = ""
        self.adjust_instruction_visible = False

        self._callbacks: List[CommitCallback] = []

    @property
    def fields(self):
        return self.top_lat, self.left_lon, self.bottom_lat, self.right_lon

    def display_bounds(
        self, top_lat: str, left_lon: str, bottom_lat: str, right_lon: str
    ):
        self.fill(top_lat, left_lon, bottom_lat, right_lon)

    def clear_display(self):
        self.fill("", "", "", "")

    def set_warning(self, message: str):
        self.warning = message

    def show_adjust_instruction(self, visible: bool):
        self.adjust_instruction_visible = visible

    def register_commit(self, callback: CommitCallback):
        if not callable(callback):
            raise TypeError("commit callback must be callable")
        self._callbacks.append(callback)

    def fill(self, top_lat: str, left_lon: str, bottom_lat: str, right_lon: str):
        """Set all four fields, as if the user had typed them."""
        self.top_lat = top_lat
        self.left_lon = left_lon
        self.bottom_lat = bottom_lat
        self.right_lon = right_lon

    def submit(self):
        """Commit the current field values to every registered callback."""
        for callback in self._callbacks:
            callback(*self.fields)
