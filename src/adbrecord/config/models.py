from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

DEFAULT_PORT = 5555
DEFAULT_WAIT_TIMEOUT_MS = 5000
DEFAULT_PULL_DELAY_MS = 200


class RecordingOptions(BaseModel):
    """
    Options for a single screen recording.

    Field names are snake_case; the camelCase names (e.g. "waitTimeout",
    "transportID") are accepted as aliases so option mappings can be passed as-is.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    serial: str | None = None  # Use device with given serial (adb -s)
    transport_id: str | None = Field(default=None, alias="transportID")  # adb -t
    hostname: str | None = None  # Connect via TCP/IP before recording
    port: int = DEFAULT_PORT  # Port used together with hostname
    wait_timeout: int = Field(default=DEFAULT_WAIT_TIMEOUT_MS, ge=0)  # ms, 0 skips wait-for-device
    bugreport: bool | None = None  # Overlay additional info (timestamps) on the video
    size: str | None = None  # WIDTHxHEIGHT, defaults to native device resolution
    bit_rate: int | None = None  # Bits per second, device default is 4000000 (4Mbps)
    time_limit: int | None = None  # Seconds, device default and maximum is 180
    pull_delay: int = Field(default=DEFAULT_PULL_DELAY_MS, ge=0)  # ms before pulling the file


class AdbSettings(BaseModel):
    """Location of the Android Debug Bridge executable."""

    path: str = "adb"


class Settings(BaseSettings):
    """
    Main configuration for screen recordings.

    Loads values from the following sources:
    - Environment variables (with prefix ADBRECORD_, nested with "__")
    - Initialization values (e.g., from YAML)
    - .env file
    - Secret files
    """

    model_config = SettingsConfigDict(env_prefix="ADBRECORD_", env_nested_delimiter="__")

    adb: AdbSettings = Field(default_factory=AdbSettings)
    recording: RecordingOptions = Field(default_factory=RecordingOptions)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,  # type: type[BaseSettings]
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Loading priority:
        1. Environment variables
        2. Initialization values (e.g., from YAML)
        3. .env file
        4. Secret files
        """
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)
