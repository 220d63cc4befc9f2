from typing import Literal

from pydantic import BaseModel, ConfigDict

from .location import LocationRecord


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True)


class EncryptedMessage(_Message):
    kind: Literal["encrypted"] = "encrypted"
    ciphertext: str  # Base64 text after the GPS_ENC: prefix


class PlainGpsMessage(_Message):
    kind: Literal["plain_gps"] = "plain_gps"
    record: LocationRecord


class QueryMessage(_Message):
    kind: Literal["query"] = "query"
    bus_id: str
    token: str  # Text fragment the identifier was derived from


class UnrecognizedMessage(_Message):
    kind: Literal["unrecognized"] = "unrecognized"
    raw: str


type EncodedMessage = (
    EncryptedMessage | PlainGpsMessage | QueryMessage | UnrecognizedMessage
)
