import base64

import pytest
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from margsetu.core import GpsCipher, KeyMaterial, canonical, normalize_base64
from margsetu.models import (
    DecodedLocation,
    DecodeFailure,
    FailureReason,
    LocationRecord,
    Provenance,
)

KEY = "MargSetu2024SecureGPSLocationKey32B"
IV = "MargSetuGPSIV16B"

SCENARIO = LocationRecord(
    bus_id="BUS001",
    latitude=18.9696,
    longitude=72.8194,
    timestamp=1700000000000,
    speed=0,
    accuracy=0,
    source="DRIVER_APP_SMS",
    version="1.0",
)


@pytest.fixture(scope="module")
def cipher():
    return GpsCipher(KeyMaterial.from_secrets(KEY, IV), enabled=True)


@pytest.fixture(scope="module")
def disabled_cipher():
    return GpsCipher(KeyMaterial.from_secrets(KEY, IV), enabled=False)


def test_scenario_round_trip(cipher):
    assert cipher.decode(cipher.encode(SCENARIO)) == SCENARIO


def test_scenario_decrypts_with_plain_aes(cipher):
    """The payload must be readable by any AES-256-CBC/PKCS7 implementation."""
    raw = base64.b64decode(cipher.encode(SCENARIO))
    decryptor = Cipher(
        algorithms.AES(b"MargSetu2024SecureGPSLocationKey"),
        modes.CBC(b"MargSetuGPSIV16B"),
    ).decryptor()
    unpadder = padding.PKCS7(128).unpadder()
    padded = decryptor.update(raw) + decryptor.finalize()
    plaintext = unpadder.update(padded) + unpadder.finalize()

    assert plaintext.decode() == canonical.serialize(SCENARIO)


def test_encoding_is_deterministic(cipher):
    # Fixed IV: identical records give identical ciphertext
    assert cipher.encode(SCENARIO) == cipher.encode(SCENARIO)


def test_ciphertext_is_block_aligned_base64(cipher):
    raw = base64.b64decode(cipher.encode(SCENARIO), validate=True)
    assert len(raw) % 16 == 0


@pytest.mark.parametrize(
    "record",
    [
        LocationRecord(bus_id="BUS123", latitude=-33.8688, longitude=151.2093),
        LocationRecord(
            bus_id="MH12AB1234",
            latitude=90.0,
            longitude=-180.0,
            speed=42.75,
            accuracy=3.2,
            source="SMS_GATEWAY",
        ),
        LocationRecord(bus_id="B", latitude=0.000001, longitude=0.1),
    ],
)
def test_round_trip(cipher, record):
    result = cipher.decode_detailed(cipher.encode(record))
    assert isinstance(result, DecodedLocation)
    assert result.provenance == Provenance.STANDARD
    assert not result.recovered
    assert result.record.bus_id == record.bus_id
    assert result.record.latitude == pytest.approx(record.latitude)
    assert result.record.longitude == pytest.approx(record.longitude)
    assert result.record.speed == pytest.approx(record.speed)
    assert result.record.timestamp == record.timestamp


def test_different_key_does_not_decode(cipher):
    other = GpsCipher(KeyMaterial.from_secrets("another-key", IV))
    result = other.decode(cipher.encode(SCENARIO))
    assert isinstance(result, DecodeFailure)


class TestDisabledMode:
    def test_encode_returns_canonical_text(self, disabled_cipher):
        assert disabled_cipher.encode(SCENARIO) == canonical.serialize(SCENARIO)

    def test_round_trip(self, disabled_cipher):
        assert disabled_cipher.decode(disabled_cipher.encode(SCENARIO)) == SCENARIO

    def test_decode_is_flagged(self, disabled_cipher):
        result = disabled_cipher.decode_detailed(disabled_cipher.encode(SCENARIO))
        assert result.provenance == Provenance.DISABLED_BYPASS

    def test_mode(self, cipher, disabled_cipher):
        assert cipher.mode == "encrypted"
        assert disabled_cipher.mode == "disabled"

    def test_ciphertext_is_not_parsed(self, cipher, disabled_cipher):
        result = disabled_cipher.decode(cipher.encode(SCENARIO))
        assert result == DecodeFailure(
            reason=FailureReason.MALFORMED, detail="invalid JSON record"
        )


class TestDecodeFailures:
    def test_not_base64(self, cipher):
        result = cipher.decode("hello, world!")
        assert isinstance(result, DecodeFailure)
        assert result.reason == FailureReason.MALFORMED

    def test_empty(self, cipher):
        result = cipher.decode("")
        assert result.reason == FailureReason.MALFORMED

    def test_aligned_garbage(self, cipher):
        garbage = base64.b64encode(bytes(range(32))).decode()
        result = cipher.decode(garbage)
        assert result.reason == FailureReason.MALFORMED

    def test_plaintext_json_is_not_accepted_when_enabled(self, cipher):
        result = cipher.decode(canonical.serialize(SCENARIO))
        assert isinstance(result, DecodeFailure)

    def test_out_of_range_record(self, cipher):
        record = LocationRecord(bus_id="BUS001", latitude=95.0, longitude=72.8)
        result = cipher.decode(cipher.encode(record))
        assert result.reason == FailureReason.INVALID_RECORD

    def test_empty_bus_id(self, cipher):
        record = LocationRecord(bus_id="", latitude=18.9, longitude=72.8)
        result = cipher.decode(cipher.encode(record))
        assert result.reason == FailureReason.INVALID_RECORD


def _inner_plus(text):
    return "+" in text and not text.startswith("+") and not text.endswith("+")


class TestSmsMangling:
    """Gateways and carriers damage base64 in a few well-known ways."""

    def test_plus_turned_into_space(self, cipher):
        records = (
            LocationRecord(bus_id="BUS001", latitude=18.9, longitude=72.8, timestamp=ts)
            for ts in range(1700000000000, 1700000001000)
        )
        # A leading or trailing space would be trimmed along with the whitespace
        record = next(r for r in records if _inner_plus(cipher.encode(r)))
        mangled = cipher.encode(record).replace("+", " ")
        assert cipher.decode(mangled) == record

    def test_url_safe_alphabet(self, cipher):
        text = cipher.encode(SCENARIO)
        assert cipher.decode(text.replace("+", "-").replace("/", "_")) == SCENARIO

    def test_missing_padding(self, cipher):
        assert cipher.decode(cipher.encode(SCENARIO).rstrip("=")) == SCENARIO

    def test_surrounding_whitespace(self, cipher):
        assert cipher.decode(f"  {cipher.encode(SCENARIO)}\n") == SCENARIO


@pytest.mark.parametrize(
    "text, expected",
    [
        ("QUJD", "QUJD"),
        ("QUI", "QUI="),
        ("QQ", "QQ=="),
        ("QUJDR", "QUJD"),
        ("a b", "a+b="),
        ("a-b_", "a+b/"),
        (" QUJD== ", "QUJD"),
    ],
)
def test_normalize_base64(text, expected):
    assert normalize_base64(text) == expected
