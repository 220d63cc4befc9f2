import re
from base64 import b64decode, b64encode
from enum import StrEnum

from margsetu.models import (
    DecodedLocation,
    DecodeFailure,
    DecodeResult,
    FailureReason,
    LocationRecord,
    Provenance,
)
from margsetu.shared import Logger
from margsetu.shared.config import Encryption

from . import block, canonical
from .keys import KeyMaterial
from .recovery import recover
from .validate import validate

logger = Logger(__name__).get_logger()

_WHITESPACE = re.compile(r"\s")


class CipherMode(StrEnum):
    ENCRYPTED = "encrypted"
    DISABLED = "disabled"


def normalize_base64(text: str) -> str:
    """Undo the usual SMS damage to base64 text.

    Gateways turn '+' into spaces and some senders use the URL-safe alphabet.
    Missing '=' padding is restored; a dangling final character that cannot hold a
    whole byte is dropped.
    """
    cleaned = _WHITESPACE.sub("+", text.strip())
    cleaned = cleaned.replace("-", "+").replace("_", "/").rstrip("=")
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    return cleaned + "=" * (-len(cleaned) % 4)


class GpsCipher:
    """AES-256-CBC codec for location records.

    Stateless apart from the key material, so one instance can be shared across
    threads and requests.
    """

    def __init__(self, keys: KeyMaterial, enabled: bool = True):
        self.__keys = keys
        self.__enabled = enabled
        logger.info("GPS encryption: %s", self.mode.name)

    @classmethod
    def from_config(cls, encryption: Encryption) -> "GpsCipher":
        keys = KeyMaterial.from_secrets(encryption.key, encryption.iv)
        return cls(keys, enabled=encryption.enabled)

    @property
    def enabled(self) -> bool:
        return self.__enabled

    @property
    def mode(self) -> CipherMode:
        return CipherMode.ENCRYPTED if self.__enabled else CipherMode.DISABLED

    def encode(self, record: LocationRecord) -> str:
        """Return base64 ciphertext, or canonical JSON when encryption is disabled."""
        plaintext = canonical.serialize(record)
        if not self.__enabled:
            logger.debug("Encryption disabled, sending %s in clear", record.bus_id)
            return plaintext

        try:
            ciphertext = block.encrypt(self.__keys, plaintext.encode("utf-8"))
        except Exception as e:
            logger.error("GPS encryption failed for %s: %s", record.bus_id, e)
            return plaintext

        logger.debug("GPS data encrypted for %s", record.bus_id)
        return b64encode(ciphertext).decode("ascii")

    def decode(self, text: str) -> LocationRecord | DecodeFailure:
        result = self.decode_detailed(text)
        if isinstance(result, DecodedLocation):
            return result.record
        return result

    def decode_detailed(self, text: str) -> DecodeResult:
        if not self.__enabled:
            return self.__decode_plaintext(text)

        try:
            ciphertext = b64decode(normalize_base64(text), validate=True)
        except ValueError as e:
            logger.debug("Payload is not base64: %s", e)
            return DecodeFailure(reason=FailureReason.MALFORMED, detail="invalid base64")

        if not ciphertext:
            return DecodeFailure(reason=FailureReason.MALFORMED, detail="empty payload")

        if len(ciphertext) % block.BLOCK_SIZE:
            recovered = recover(ciphertext, self.__keys)
            if recovered is None:
                return DecodeFailure(
                    reason=FailureReason.UNRECOVERABLE,
                    detail=f"truncated ciphertext of {len(ciphertext)} bytes",
                )
            record, provenance = recovered
            return DecodedLocation(record=record, provenance=provenance)

        try:
            record = canonical.parse(block.decrypt(self.__keys, ciphertext))
        except ValueError as e:
            logger.debug("Decryption failed, treating as unprocessable: %s", e)
            return DecodeFailure(reason=FailureReason.MALFORMED, detail="decryption failed")

        return self.__accept(record, Provenance.STANDARD)

    def __decode_plaintext(self, text: str) -> DecodeResult:
        try:
            record = canonical.parse(text)
        except ValueError as e:
            logger.debug("Unencrypted GPS parse failed: %s", e)
            return DecodeFailure(reason=FailureReason.MALFORMED, detail="invalid JSON record")

        return self.__accept(record, Provenance.DISABLED_BYPASS)

    @staticmethod
    def __accept(record: LocationRecord, provenance: Provenance) -> DecodeResult:
        if not validate(record):
            logger.debug("Decoded record failed validation: %s", record.bus_id or "<no bus>")
            return DecodeFailure(
                reason=FailureReason.INVALID_RECORD, detail="record out of range"
            )

        logger.debug("GPS data decoded for %s (%s)", record.bus_id, provenance)
        return DecodedLocation(record=record, provenance=provenance)
