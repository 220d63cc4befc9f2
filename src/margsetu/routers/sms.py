from typing import Annotated, get_args

from fastapi import APIRouter, Depends, HTTPException, Query

from margsetu.core import GpsCipher, LogEntry, MessageLog, decode_message, validate
from margsetu.core.parser import ENCRYPTED_PREFIX
from margsetu.models import DecodedLocation, DecodeFailure, QueryReference
from margsetu.models.requests import SmsType, SmsWebhookRequest, SmsWebhookResponse
from margsetu.shared import Logger
from margsetu.shared.http import server_error_handler

from .deps import get_cipher, get_message_log

logger = Logger(__name__).get_logger()

router = APIRouter()

SMS_TYPES = frozenset(get_args(SmsType))


@router.post("/sms/webhook", response_model=SmsWebhookResponse)
async def sms_webhook(
    data: SmsWebhookRequest,
    cipher: Annotated[GpsCipher, Depends(get_cipher)],
    message_log: Annotated[MessageLog, Depends(get_message_log)],
):
    """
    Receives every SMS forwarded by the Android gateway.

    - sms_raw: decode GPS_ENC / GPS: location updates or detect a passenger query
    - driver_location: gateway already extracted busId/latitude/longitude
    - passenger_query: gateway already extracted the queried busId
    - test: connectivity check

    Location updates never produce an SMS reply; queries are handed on to the
    notification service by the caller.
    """
    try:
        if data.type not in SMS_TYPES:
            logger.warning("Unknown SMS type: %s", data.type)
            raise HTTPException(status_code=400, detail=f"Unknown SMS type: {data.type}")

        with server_error_handler():
            response = _dispatch(data, cipher)

    except HTTPException:
        _record(message_log, data, kind="rejected", processed=False)
        raise

    _record(message_log, data, kind=response.kind, processed=response.processed)
    return response


def _record(message_log: MessageLog, data: SmsWebhookRequest, kind: str, processed: bool):
    message_log.add(
        LogEntry(sender=data.sender, message=data.message, kind=kind, processed=processed)
    )


def _encrypted(message: str, cipher: GpsCipher) -> bool:
    # In disabled mode a GPS_ENC: payload is canonical JSON in clear
    return cipher.enabled and message.strip().startswith(ENCRYPTED_PREFIX)


def _dispatch(data: SmsWebhookRequest, cipher: GpsCipher) -> SmsWebhookResponse:
    match data.type:
        case "driver_location":
            fields = {
                "busId": data.bus_id,
                "latitude": data.latitude,
                "longitude": data.longitude,
            }
            if not validate(fields):
                raise HTTPException(status_code=400, detail="Missing required location data")

            logger.info("Driver location via SMS: %s", data.bus_id)
            return SmsWebhookResponse(
                processed=True,
                kind="location",
                message="Driver location received via SMS",
                bus_id=data.bus_id,
                location={"latitude": data.latitude, "longitude": data.longitude},
            )

        case "passenger_query":
            if not data.bus_id:
                raise HTTPException(status_code=400, detail="Missing busId")

            logger.info("Passenger query via SMS for %s", data.bus_id)
            return SmsWebhookResponse(
                processed=True,
                kind="query",
                message="Passenger query received",
                bus_id=data.bus_id.upper(),
            )

        case "test":
            logger.info("SMS gateway connection test from %s", data.sender or "gateway")
            return SmsWebhookResponse(
                processed=True, kind="test", message="SMS gateway connection test successful"
            )

    return _raw_sms(data.message, cipher)


def _raw_sms(message: str, cipher: GpsCipher) -> SmsWebhookResponse:
    result = decode_message(message, cipher)

    match result:
        case DecodedLocation(record=record):
            logger.info(
                "GPS via SMS: %s @ %s,%s (%s)",
                record.bus_id,
                record.latitude,
                record.longitude,
                result.provenance,
            )
            return SmsWebhookResponse(
                processed=True,
                kind=result.kind,
                message="GPS location extracted from raw SMS",
                bus_id=record.bus_id,
                location={"latitude": record.latitude, "longitude": record.longitude},
                encrypted=_encrypted(message, cipher),
                provenance=str(result.provenance),
                source=record.source,
            )

        case QueryReference(bus_id=bus_id):
            logger.info("Passenger query detected in raw SMS for %s", bus_id)
            return SmsWebhookResponse(
                processed=True,
                kind=result.kind,
                message="Passenger bus query detected",
                bus_id=bus_id,
            )

        case DecodeFailure(reason=reason):
            # Truncated and out-of-range payloads are routine on the SMS path
            return SmsWebhookResponse(
                processed=False,
                kind=result.kind,
                message=f"GPS message not decodable ({reason})",
                encrypted=_encrypted(message, cipher),
            )

    return SmsWebhookResponse(
        processed=False, kind=result.kind, message="Raw SMS received and logged"
    )


@router.get("/sms/log", response_model=list[LogEntry])
async def sms_log(
    message_log: Annotated[MessageLog, Depends(get_message_log)],
    limit: Annotated[int | None, Query(gt=0)] = None,
):
    return message_log.recent(limit)
