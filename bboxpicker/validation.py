from __future__ import annotations

import logging
import math
from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

from bboxpicker.utils.dateline import adjust_for_date_line, is_valid_latitude

log = logging.getLogger(__name__)

RawValue = Union[str, float, int, None]


class Rejection(Enum):
    """
    The reasons a set of typed bounds can be rejected, in the order they are checked.

    Each member's value is the warning shown to the user.
    """

    FIELDS_EMPTY = "Some input fields are empty"
    SAME_LATITUDE = "Same latitude on both points"
    SAME_LONGITUDE = "Same longitude on both points"
    LATITUDE_OUT_OF_RANGE = "Latitude should be between -90 and 90"

    @property
    def message(self) -> str:
        return self.value


class Verdict(NamedTuple):
    """
    The outcome of validating four raw field values.

    Attributes:
        rejection: The reason the values were rejected, or None if they are acceptable
        values: The four parsed floats (top_lat, left_lon, bottom_lat, right_lon); only
            set when the values are acceptable
        silent: True if the rejection is expected (the user is still typing) and should
            not produce a warning
    """

    rejection: Optional[Rejection] = None
    values: Optional[Tuple[float, float, float, float]] = None
    silent: bool = False

    @property
    def ok(self) -> bool:
        return self.rejection is None

    @classmethod
    def accept(cls, values: Tuple[float, float, float, float]) -> Verdict:
        return cls(values=values)

    @classmethod
    def reject(cls, rejection: Rejection, silent: bool = False) -> Verdict:
        return cls(rejection=rejection, silent=silent)


def parse_coordinate(raw: RawValue) -> Optional[float]:
    """
    Parse one field value into a float.

    Args:
        raw: A string typed by the user, a number, or None

    Returns:
        The parsed value, or None if the field is blank or not a finite number
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None

    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(value):
        return None

    return value


def validate(
    top_lat: RawValue,
    left_lon: RawValue,
    bottom_lat: RawValue,
    right_lon: RawValue,
    allow_blank: bool = False,
) -> Verdict:
    """
    Validate four raw bounding box field values.

    The checks run in a fixed order and the first failure wins:

    1. any field blank or not a number -> FIELDS_EMPTY
    2. equal latitudes -> SAME_LATITUDE
    3. equal longitudes, or longitudes a full turn apart once the box is shifted
       across the date line -> SAME_LONGITUDE
    4. a latitude outside [-90, 90] -> LATITUDE_OUT_OF_RANGE

    Equality is numeric, so "10", "10." and "10.0" are the same latitude.

    Args:
        top_lat: The northern latitude field
        left_lon: The western longitude field
        bottom_lat: The southern latitude field
        right_lon: The eastern longitude field
        allow_blank: If True, blank fields are expected (nothing has been drawn yet and
            the user is still typing) and the FIELDS_EMPTY rejection is marked silent

    Returns:
        A Verdict that is either ok and carries the parsed values, or carries the
        rejection reason

    Examples:
        >>> validate("10", "0", "10", "5").rejection
        <Rejection.SAME_LATITUDE: 'Same latitude on both points'>
        >>> validate(10, 0, -10, 5).ok
        True
    """
    parsed = [parse_coordinate(v) for v in (top_lat, left_lon, bottom_lat, right_lon)]

    if any(v is None for v in parsed):
        log.debug(f"blank or non-numeric field in {parsed}")
        return Verdict.reject(Rejection.FIELDS_EMPTY, silent=allow_blank)

    top, left, bottom, right = parsed

    if top == bottom:
        return Verdict.reject(Rejection.SAME_LATITUDE)

    # 180 and -180 (or 200 and -160) meet again after the date line shift
    if left == right or adjust_for_date_line(left, right) == left:
        return Verdict.reject(Rejection.SAME_LONGITUDE)

    if not (is_valid_latitude(top) and is_valid_latitude(bottom)):
        return Verdict.reject(Rejection.LATITUDE_OUT_OF_RANGE)

    return Verdict.accept((top, left, bottom, right))
