from collections.abc import Mapping
from math import isfinite
from numbers import Real

from margsetu.models import LocationRecord

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


def _coordinate(value, bounds: tuple[float, float]) -> bool:
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    if not isfinite(value):
        return False
    low, high = bounds
    return low <= value <= high


def validate(record: LocationRecord | Mapping | None) -> bool:
    """Check that a record names a bus and sits on the globe.

    Accepts a `LocationRecord` or a raw mapping keyed by wire names, as decoded
    straight from JSON.
    """
    if isinstance(record, LocationRecord):
        bus_id, latitude, longitude = record.bus_id, record.latitude, record.longitude
    elif isinstance(record, Mapping):
        bus_id = record.get("busId")
        latitude = record.get("latitude")
        longitude = record.get("longitude")
    else:
        return False

    if not isinstance(bus_id, str) or not bus_id:
        return False

    return _coordinate(latitude, LATITUDE_RANGE) and _coordinate(
        longitude, LONGITUDE_RANGE
    )
