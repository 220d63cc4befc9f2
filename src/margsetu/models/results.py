from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .location import LocationRecord


class Provenance(StrEnum):
    STANDARD = "standard"
    ZERO_PAD_RECOVERY = "zero_pad_recovery"
    SPACE_PAD_RECOVERY = "space_pad_recovery"
    NULL_PAD_RECOVERY = "null_pad_recovery"
    MARKER_PAD_RECOVERY = "marker_pad_recovery"
    DISABLED_BYPASS = "disabled_bypass"
    PLAINTEXT = "plaintext"


RECOVERED = frozenset(
    {
        Provenance.ZERO_PAD_RECOVERY,
        Provenance.SPACE_PAD_RECOVERY,
        Provenance.NULL_PAD_RECOVERY,
        Provenance.MARKER_PAD_RECOVERY,
    }
)


class FailureReason(StrEnum):
    MALFORMED = "malformed"
    UNRECOVERABLE = "unrecoverable"
    INVALID_RECORD = "invalid_record"


class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class DecodedLocation(_Result):
    kind: Literal["location"] = "location"
    record: LocationRecord
    provenance: Provenance

    @property
    def recovered(self) -> bool:
        """True when the record came out of a truncation-repair heuristic.

        Such records decrypted and validated, but the repair guesses have no
        cryptographic backing; treat them as lower confidence than a standard decode.
        """
        return self.provenance in RECOVERED


class QueryReference(_Result):
    kind: Literal["query"] = "query"
    bus_id: str
    token: str


class Unrecognized(_Result):
    kind: Literal["unrecognized"] = "unrecognized"
    raw: str


class DecodeFailure(_Result):
    kind: Literal["failure"] = "failure"
    reason: FailureReason
    detail: str = ""


type DecodeResult = DecodedLocation | DecodeFailure
type MessageResult = DecodedLocation | QueryReference | Unrecognized | DecodeFailure
