"""
Best-effort repair of ciphertext that lost trailing bytes in transit.

Carrier SMS paths cut long messages at a fixed size, so a GPS_ENC payload can arrive
a few bytes short of a block boundary. CBC cannot resynchronise from that; the
strategies below only guess at the missing tail and keep a result when it decrypts to
a record that validates. Most truncated messages will not come back, and that is an
expected outcome, not an error.
"""

from collections.abc import Callable

from margsetu.models import LocationRecord, Provenance
from margsetu.shared import Logger

from .block import BLOCK_SIZE, decrypt, decrypt_raw, strip_pkcs7
from .canonical import load_valid
from .keys import KeyMaterial

logger = Logger(__name__).get_logger()

type Strategy = Callable[[bytes, KeyMaterial], LocationRecord | None]


def missing_bytes(ciphertext: bytes) -> int:
    remainder = len(ciphertext) % BLOCK_SIZE
    return BLOCK_SIZE - remainder if remainder else 0


def zero_pad_repair(ciphertext: bytes, keys: KeyMaterial) -> LocationRecord | None:
    repaired = ciphertext + bytes(missing_bytes(ciphertext))
    try:
        plaintext = decrypt_raw(keys, repaired)
    except ValueError:
        return None

    return load_valid(strip_pkcs7(plaintext))


def pad_byte_repair(pad_byte: int) -> Strategy:
    def repair(ciphertext: bytes, keys: KeyMaterial) -> LocationRecord | None:
        repaired = ciphertext + bytes([pad_byte]) * missing_bytes(ciphertext)
        try:
            plaintext = decrypt(keys, repaired)
        except ValueError:
            return None

        return load_valid(plaintext)

    repair.__name__ = f"pad_byte_repair_{pad_byte:#04x}"
    return repair


STRATEGIES: tuple[tuple[Provenance, Strategy], ...] = (
    (Provenance.ZERO_PAD_RECOVERY, zero_pad_repair),
    (Provenance.SPACE_PAD_RECOVERY, pad_byte_repair(0x20)),
    (Provenance.NULL_PAD_RECOVERY, pad_byte_repair(0x00)),
    (Provenance.MARKER_PAD_RECOVERY, pad_byte_repair(0x10)),
)


def recover(
    ciphertext: bytes, keys: KeyMaterial
) -> tuple[LocationRecord, Provenance] | None:
    """Try each repair strategy in order; first validated record wins."""
    if not ciphertext or missing_bytes(ciphertext) == 0:
        return None

    logger.debug(
        "Truncated ciphertext: %d bytes, %d missing",
        len(ciphertext),
        missing_bytes(ciphertext),
    )

    for provenance, strategy in STRATEGIES:
        record = strategy(ciphertext, keys)
        if record is not None:
            logger.info("Recovered truncated payload for %s (%s)", record.bus_id, provenance)
            return record, provenance

    logger.debug("Truncated ciphertext not recoverable")
    return None
