from time import time

from pydantic import BaseModel, ConfigDict, Field

RECORD_VERSION = "1.0"


def now_millis() -> int:
    return int(time() * 1000)


class LocationRecord(BaseModel):
    """A single bus position as carried over SMS and HTTP.

    Field aliases are the wire keys of the canonical serialisation. Range checks
    live in `margsetu.core.validate` so that a decoded but out-of-range record can
    still be represented and rejected explicitly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    bus_id: str = Field(..., alias="busId", description="Bus identifier, e.g. BUS001")
    latitude: float = Field(..., description="Degrees north, [-90, 90]")
    longitude: float = Field(..., description="Degrees east, [-180, 180]")
    timestamp: int = Field(
        default_factory=now_millis, description="Epoch milliseconds"
    )
    speed: float = Field(default=0, ge=0)
    accuracy: float = Field(default=0, ge=0)
    source: str = Field(default="SMS", description="Channel that produced the record")
    version: str = RECORD_VERSION
