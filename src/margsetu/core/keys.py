"""
Key and IV material for the GPS cipher.

The secrets are stretched or cut to length by plain string padding, exactly as the
driver app and SMS gateway do, so that payloads already in circulation keep
decrypting. This is NOT key derivation: a new deployment should use a real KDF and a
fresh IV per message. A fixed IV under CBC lets an observer see when two messages
share a plaintext prefix (same bus, same second).
"""

from pydantic import BaseModel, ConfigDict, Field

KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16  # AES block size
PAD_BYTE = b"0"  # ASCII zero, not NUL


def _fit(secret: str, length: int) -> bytes:
    raw = secret.encode("utf-8")
    return raw[:length].ljust(length, PAD_BYTE)


def normalize_key(secret: str) -> bytes:
    return _fit(secret, KEY_LENGTH)


def normalize_iv(secret: str) -> bytes:
    return _fit(secret, IV_LENGTH)


class KeyMaterial(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: bytes = Field(..., min_length=KEY_LENGTH, max_length=KEY_LENGTH, repr=False)
    iv: bytes = Field(..., min_length=IV_LENGTH, max_length=IV_LENGTH, repr=False)

    @classmethod
    def from_secrets(cls, key: str, iv: str) -> "KeyMaterial":
        return cls(key=normalize_key(key), iv=normalize_iv(iv))
