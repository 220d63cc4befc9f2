from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING
from os import PathLike
from pathlib import Path
from tomllib import load

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path("config.toml")

# Literals built into the driver app and SMS gateway. Payloads already in
# the field were encrypted under these, so they stay the fallback.
DEFAULT_GPS_KEY = "MargSetu2024SecureGPSLocationKey32B"
DEFAULT_GPS_IV = "MargSetuGPSIV16B"


class General(BaseModel):
    title: str


class Logging(BaseModel):
    level: int

    @field_validator("level", mode="before")
    @classmethod
    def convert_log_level(cls, value):
        log_levels = {
            "DEBUG": DEBUG,
            "INFO": INFO,
            "WARNING": WARNING,
            "ERROR": ERROR,
            "CRITICAL": CRITICAL,
        }
        return log_levels.get(value.upper(), INFO)


class Paths(BaseModel):
    logs: str


class Encryption(BaseModel):
    key: str = DEFAULT_GPS_KEY
    iv: str = DEFAULT_GPS_IV
    enabled: bool = True

    @field_validator("key", "iv", mode="before")
    @classmethod
    def fallback_when_blank(cls, value, info):
        # An empty entry in the TOML means "not configured"
        if value is None or value == "":
            return DEFAULT_GPS_KEY if info.field_name == "key" else DEFAULT_GPS_IV
        return value


class Sms(BaseModel):
    log_size: int = Field(default=100, gt=0)


class Network(BaseModel):
    host: str
    port: int
    reload: bool


class Config(BaseModel):
    general: General
    paths: Paths
    logging: Logging
    encryption: Encryption = Encryption()
    sms: Sms = Sms()
    network: Network


def load_config(
    shared_config_file: PathLike = DEFAULT_CONFIG_PATH,
    specific_config_file: PathLike | None = None,
) -> Config:
    """Load and merge configurations from TOML files."""
    # Load shared config
    with Path(shared_config_file).open("rb") as f:
        config_data = load(f)

    # Load and merge specific config if provided
    if specific_config_file:
        with Path(specific_config_file).open("rb") as f:
            specific_data = load(f)
            config_data.update(specific_data)

    return Config(**config_data)
