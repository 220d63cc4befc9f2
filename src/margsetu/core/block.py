from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .keys import KeyMaterial

BLOCK_SIZE = 16
_BLOCK_BITS = BLOCK_SIZE * 8


def _cipher(keys: KeyMaterial) -> Cipher:
    return Cipher(algorithms.AES(keys.key), modes.CBC(keys.iv))


def encrypt(keys: KeyMaterial, plaintext: bytes) -> bytes:
    """AES-256-CBC with PKCS#7 padding."""
    padder = padding.PKCS7(_BLOCK_BITS).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = _cipher(keys).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt(keys: KeyMaterial, ciphertext: bytes) -> bytes:
    """Decrypt and remove PKCS#7 padding.

    Raises ValueError on a misaligned buffer or inconsistent padding.
    """
    plaintext = decrypt_raw(keys, ciphertext)

    unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
    return unpadder.update(plaintext) + unpadder.finalize()


def decrypt_raw(keys: KeyMaterial, ciphertext: bytes) -> bytes:
    """Decrypt without touching the padding.

    Raises ValueError if the buffer is not block aligned.
    """
    decryptor = _cipher(keys).decryptor()
    return decryptor.update(ciphertext) + decryptor.finalize()


def strip_pkcs7(data: bytes) -> bytes:
    """Drop a trailing PKCS#7 run if one is present, otherwise return data as-is."""
    if not data:
        return data

    count = data[-1]
    if 1 <= count <= BLOCK_SIZE and count <= len(data):
        if data[-count:] == bytes([count]) * count:
            return data[:-count]

    return data
