from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SmsType = Literal["sms_raw", "driver_location", "passenger_query", "test"]


class SmsWebhookRequest(BaseModel):
    """Body forwarded by the Android SMS gateway for every inbound SMS."""

    model_config = ConfigDict(populate_by_name=True)

    type: str  # checked against SmsType by the router so unknown types get a 400
    message: str = ""
    sender: str | None = None
    bus_id: str | None = Field(default=None, alias="busId")
    latitude: float | None = None
    longitude: float | None = None
    timestamp: int | None = None


class SmsWebhookResponse(BaseModel):
    success: bool = True
    processed: bool
    kind: str
    message: str
    bus_id: str | None = Field(default=None, serialization_alias="busId")
    location: dict[str, float] | None = None
    encrypted: bool = False
    provenance: str | None = None
    source: str | None = None


class EncodeLocationResponse(BaseModel):
    message: str  # SMS-ready text, GPS_ENC:<payload>
    encrypted: bool
