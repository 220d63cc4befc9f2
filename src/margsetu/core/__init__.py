# GPS location codec: key material, AES-CBC wrapping, truncation repair,
# SMS format detection and record validation. Nothing in here touches the
# network or a database.
from .cipher import CipherMode, GpsCipher, normalize_base64
from .codec import create_sms_message, decode_message, encode_location
from .keys import KeyMaterial, normalize_iv, normalize_key
from .message_log import LogEntry, MessageLog
from .parser import parse_message
from .recovery import recover
from .validate import validate

__all__ = [
    "CipherMode",
    "GpsCipher",
    "KeyMaterial",
    "LogEntry",
    "MessageLog",
    "create_sms_message",
    "decode_message",
    "encode_location",
    "normalize_base64",
    "normalize_iv",
    "normalize_key",
    "parse_message",
    "recover",
    "validate",
]
