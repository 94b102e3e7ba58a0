from enum import Enum


class LifecycleState(Enum):
    """
    Where the box came from, which decides how a typed commit is drawn.

    - INIT: nothing has been drawn yet
    - DRAGGED: a box has been dragged on the map at least once; typed commits re-arm
      the drag and edit-handles controls before drawing
    - DRAWN_FROM_INPUT: the box has only ever been typed in; commits just redraw
    """

    INIT = "init"
    DRAGGED = "dragged"
    DRAWN_FROM_INPUT = "drawn_from_input"
