from .location import RECORD_VERSION, LocationRecord, now_millis
from .messages import (
    EncodedMessage,
    EncryptedMessage,
    PlainGpsMessage,
    QueryMessage,
    UnrecognizedMessage,
)
from .results import (
    DecodedLocation,
    DecodeFailure,
    DecodeResult,
    FailureReason,
    MessageResult,
    Provenance,
    QueryReference,
    Unrecognized,
)

__all__ = [
    "RECORD_VERSION",
    "DecodeFailure",
    "DecodeResult",
    "DecodedLocation",
    "EncodedMessage",
    "EncryptedMessage",
    "FailureReason",
    "LocationRecord",
    "MessageResult",
    "PlainGpsMessage",
    "Provenance",
    "QueryMessage",
    "QueryReference",
    "Unrecognized",
    "UnrecognizedMessage",
    "now_millis",
]
