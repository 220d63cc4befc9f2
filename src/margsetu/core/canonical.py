"""
Canonical text form of a LocationRecord, the plaintext under the cipher.

The Android apps build this with JSON.stringify, so key order is fixed and numbers
follow JavaScript rendering: 0 not 0.0, 1e-7 not 1e-07.
"""

import json
from decimal import Decimal
from math import isfinite

from margsetu.models import LocationRecord

from .validate import validate

FIELD_ORDER = (
    ("busId", "bus_id"),
    ("latitude", "latitude"),
    ("longitude", "longitude"),
    ("timestamp", "timestamp"),
    ("speed", "speed"),
    ("accuracy", "accuracy"),
    ("source", "source"),
    ("version", "version"),
)


def _js_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if not isfinite(value):
        return "null"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text

    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -7 < power < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def _render(value) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return _js_number(value)


def serialize(record: LocationRecord) -> str:
    members = (
        f"{json.dumps(key)}:{_render(getattr(record, attr))}"
        for key, attr in FIELD_ORDER
    )
    return "{" + ",".join(members) + "}"


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse(text: str | bytes) -> LocationRecord:
    """Parse canonical text into a record.

    Raises ValueError for undecodable bytes, invalid or pathologically nested JSON, a
    non-object document, or fields of the wrong type. Range checks are left to `validate`.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValueError("JSON nested too deeply") from e

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")

    return LocationRecord.model_validate(data)


def load_valid(text: str | bytes) -> LocationRecord | None:
    """Parse and validate, returning None instead of raising."""
    try:
        record = parse(text)
    except ValueError:
        return None

    return record if validate(record) else None
