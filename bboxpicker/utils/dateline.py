"""Longitude math for boxes that may cross the antimeridian (the +/-180 meridian)."""

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

FULL_TURN = 360.0


def adjust_for_date_line(left_lon: float, right_lon: float) -> float:
    """
    Shift the right longitude of a box past 180 when the box crosses the date line.

    A box crosses the antimeridian when its left edge is numerically greater than its
    right edge (e.g. from 170 to -170). Representing the right edge as 190 keeps the
    box contiguous so it can be drawn as a single rectangle.

    Args:
        left_lon: The left (western) longitude in degrees
        right_lon: The right (eastern) longitude in degrees

    Returns:
        right_lon + 360 if the box crosses the date line, otherwise right_lon unchanged

    Examples:
        >>> adjust_for_date_line(170, -170)
        190
        >>> adjust_for_date_line(-170, 170)
        170
    """
    if left_lon > right_lon:
        return right_lon + FULL_TURN

    return right_lon


def wrap_to_canonical(lon: float) -> float:
    """
    Map any longitude to an angularly equivalent value in [-180, 180].

    Values already inside the range are returned as-is, so both -180 and 180 survive
    untouched. Everything else is wrapped with a floored modulo into (-180, 180].
    Because both edges are kept, wrap_to_canonical(x) == wrap_to_canonical(x + 360)
    holds for every x except -180, where -180 and 180 stay distinct.

    Only display values go through this function; a stored BoundsModel keeps its
    right longitude beyond 180 when the box crosses the date line.

    Args:
        lon: A longitude in degrees, any real value

    Returns:
        The equivalent longitude in [-180, 180]

    Examples:
        >>> wrap_to_canonical(200)
        -160.0
        >>> wrap_to_canonical(-200)
        160.0
        >>> wrap_to_canonical(10)
        10
    """
    if MIN_LONGITUDE <= lon <= MAX_LONGITUDE:
        return lon

    return MAX_LONGITUDE - (MAX_LONGITUDE - lon) % FULL_TURN


def is_valid_latitude(lat: float) -> bool:
    return MIN_LATITUDE <= lat <= MAX_LATITUDE
