import re

from margsetu.models import (
    RECORD_VERSION,
    EncodedMessage,
    EncryptedMessage,
    LocationRecord,
    PlainGpsMessage,
    QueryMessage,
    UnrecognizedMessage,
    now_millis,
)

ENCRYPTED_PREFIX = "GPS_ENC:"
PLAIN_PREFIX = "GPS:"
PLAIN_SOURCE = "SMS_PLAIN"

# Registrations have no mapping table yet; they all resolve to this bus
DEFAULT_BUS_ID = "BUS001"

_PLAIN_GPS = re.compile(
    r"^GPS:([A-Z0-9]+),(-?\d+\.?\d*),(-?\d+\.?\d*)", re.IGNORECASE
)
_BUS_NUMBER = re.compile(r"BUS(\d+)", re.IGNORECASE)
_REGISTRATION = re.compile(r"[A-Z]{2}\d{2}[A-Z]{1,2}\d{4}", re.IGNORECASE)
_KEYWORD_QUERY = re.compile(
    r"(details|location|status|info|query|where|loc)\s+([A-Z0-9]{4,})", re.IGNORECASE
)


def parse_message(text: str) -> EncodedMessage:
    """Classify one inbound SMS.

    Location prefixes are checked first so a driver update is never answered as a
    passenger query.
    """
    message = text.strip()

    if message.startswith(ENCRYPTED_PREFIX):
        return EncryptedMessage(ciphertext=message.removeprefix(ENCRYPTED_PREFIX))

    if (plain := _parse_plain(message)) is not None:
        return plain

    # A malformed GPS: update is still not a passenger query
    if message.startswith(PLAIN_PREFIX):
        return UnrecognizedMessage(raw=message)

    return _parse_query(message) or UnrecognizedMessage(raw=message)


def _parse_plain(message: str) -> PlainGpsMessage | None:
    match = _PLAIN_GPS.match(message)
    if match is None:
        return None

    bus_id, latitude, longitude = match.groups()
    record = LocationRecord(
        bus_id=bus_id,
        latitude=float(latitude),
        longitude=float(longitude),
        timestamp=now_millis(),
        source=PLAIN_SOURCE,
        version=RECORD_VERSION,
    )

    return PlainGpsMessage(record=record)


def _parse_query(message: str) -> QueryMessage | None:
    if match := _BUS_NUMBER.search(message):
        return QueryMessage(bus_id=f"BUS{match.group(1).zfill(3)}", token=match.group(0))

    if match := _REGISTRATION.search(message):
        return QueryMessage(bus_id=DEFAULT_BUS_ID, token=match.group(0))

    if match := _KEYWORD_QUERY.search(message):
        token = match.group(2)
        if _REGISTRATION.fullmatch(token):
            bus_id = DEFAULT_BUS_ID
        elif token.upper().startswith("BUS"):
            bus_id = token.upper()
        else:
            bus_id = DEFAULT_BUS_ID
        return QueryMessage(bus_id=bus_id, token=token)

    return None
