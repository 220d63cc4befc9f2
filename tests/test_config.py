from margsetu.shared.config import DEFAULT_GPS_IV, DEFAULT_GPS_KEY, load_config

BASE = """
[general]
title = "test"

[paths]
logs = "logs"

[logging]
level = "debug"

[network]
host = "127.0.0.1"
port = 8000
reload = false
"""


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_encryption_defaults(tmp_path):
    config = load_config(write(tmp_path, "config.toml", BASE))
    assert config.encryption.key == DEFAULT_GPS_KEY
    assert config.encryption.iv == DEFAULT_GPS_IV
    assert config.encryption.enabled is True
    assert config.sms.log_size == 100
    assert config.logging.level == 10


def test_blank_secrets_fall_back(tmp_path):
    text = BASE + '\n[encryption]\nkey = ""\niv = ""\nenabled = false\n'
    config = load_config(write(tmp_path, "config.toml", text))
    assert config.encryption.key == DEFAULT_GPS_KEY
    assert config.encryption.iv == DEFAULT_GPS_IV
    assert config.encryption.enabled is False


def test_specific_config_overrides(tmp_path):
    shared = write(tmp_path, "config.toml", BASE)
    specific = write(
        tmp_path, "prod.toml", '[encryption]\nkey = "prod-key"\niv = "prod-iv"\n'
    )
    config = load_config(shared, specific)
    assert config.encryption.key == "prod-key"
    assert config.encryption.iv == "prod-iv"
