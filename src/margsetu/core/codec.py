from margsetu.models import (
    DecodedLocation,
    DecodeFailure,
    EncryptedMessage,
    FailureReason,
    LocationRecord,
    MessageResult,
    PlainGpsMessage,
    Provenance,
    QueryMessage,
    QueryReference,
    Unrecognized,
    UnrecognizedMessage,
)
from margsetu.shared import Logger

from .cipher import GpsCipher
from .parser import ENCRYPTED_PREFIX, parse_message
from .validate import validate

logger = Logger(__name__).get_logger()


def encode_location(record: LocationRecord, cipher: GpsCipher) -> str:
    return cipher.encode(record)


def create_sms_message(record: LocationRecord, cipher: GpsCipher) -> str:
    """Build the SMS text a driver handset sends: GPS_ENC:<payload>."""
    return ENCRYPTED_PREFIX + cipher.encode(record)


def decode_message(raw: str, cipher: GpsCipher) -> MessageResult:
    """Turn one inbound SMS into a location, a passenger query, or a soft failure.

    Never raises for malformed input; truncated, invalid and unknown messages all
    come back as typed results for the caller to drop.
    """
    match parse_message(raw):
        case EncryptedMessage(ciphertext=ciphertext):
            result = cipher.decode_detailed(ciphertext)
            if isinstance(result, DecodeFailure):
                logger.debug("Encrypted GPS not decoded: %s", result.reason)
            return result

        case PlainGpsMessage(record=record):
            if not validate(record):
                logger.debug("Plain GPS out of range for %s", record.bus_id)
                return DecodeFailure(
                    reason=FailureReason.INVALID_RECORD, detail="record out of range"
                )
            return DecodedLocation(record=record, provenance=Provenance.PLAINTEXT)

        case QueryMessage(bus_id=bus_id, token=token):
            logger.debug("Passenger query for %s (%s)", bus_id, token)
            return QueryReference(bus_id=bus_id, token=token)

        case UnrecognizedMessage(raw=text):
            return Unrecognized(raw=text)
