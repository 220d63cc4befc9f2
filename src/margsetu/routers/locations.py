from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from margsetu.core import GpsCipher, create_sms_message, validate
from margsetu.models import LocationRecord
from margsetu.models.requests import EncodeLocationResponse
from margsetu.shared import Logger

from .deps import get_cipher

logger = Logger(__name__).get_logger()

router = APIRouter()


@router.post("/locations/encode", response_model=EncodeLocationResponse)
async def encode_location(
    record: LocationRecord,
    cipher: Annotated[GpsCipher, Depends(get_cipher)],
):
    """Produce the SMS text a driver handset would send for this record."""
    if not validate(record):
        logger.warning("Refusing to encode invalid record for %r", record.bus_id)
        raise HTTPException(status_code=400, detail="Invalid location record")

    return EncodeLocationResponse(
        message=create_sms_message(record, cipher),
        encrypted=cipher.enabled,
    )


@router.get("/health")
async def health(cipher: Annotated[GpsCipher, Depends(get_cipher)]):
    return {"status": "ok", "encryption": str(cipher.mode)}

