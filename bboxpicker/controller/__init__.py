from bboxpicker.controller.bounding_box import BoundingBoxController
from bboxpicker.controller.state import LifecycleState

__all__ = ["BoundingBoxController", "LifecycleState"]
