from abc import ABCMeta, abstractmethod
from typing import Callable

CommitCallback = Callable[[str, str, str, str], None]


class FormBindingInterface(metaclass=ABCMeta):
    """
    Abstract base class for the four coordinate input fields and their warning line.

    The form shows the current box as formatted strings, shows validation warnings and
    hands the raw typed values to the BoundingBoxController when the user commits them.
    """

    @abstractmethod
    def display_bounds(
        self, top_lat: str, left_lon: str, bottom_lat: str, right_lon: str
    ):
        """
        Show a box in the input fields.

        Args:
            top_lat: The formatted northern latitude
            left_lon: The formatted western longitude
            bottom_lat: The formatted southern latitude
            right_lon: The formatted eastern longitude
        """

    @abstractmethod
    def clear_display(self):
        """Empty all four input fields."""

    @abstractmethod
    def set_warning(self, message: str):
        """
        Show a warning under the input fields.

        Args:
            message: The warning text; an empty string clears the warning
        """

    @abstractmethod
    def show_adjust_instruction(self, visible: bool):
        """Show or hide the hint telling the user the drawn box can be adjusted."""

    @abstractmethod
    def register_commit(self, callback: CommitCallback):
        """
        Subscribe a callback to input commits.

        Args:
            callback: Called with the four raw field strings
                (top_lat, left_lon, bottom_lat, right_lon)
        """
