from bboxpicker.constructs.bounds import BoundsModel, DisplayBounds, MapBounds, to_display
from bboxpicker.controller.bounding_box import BoundingBoxController
from bboxpicker.controller.state import LifecycleState
from bboxpicker.validation import Rejection, Verdict, validate

__all__ = [
    "BoundingBoxController",
    "BoundsModel",
    "DisplayBounds",
    "LifecycleState",
    "MapBounds",
    "Rejection",
    "Verdict",
    "to_display",
    "validate",
]
