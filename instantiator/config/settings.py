import os
from typing import Optional, Tuple, Type

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, YamlConfigSettingsSource

from instantiator.shared.state import DEFAULT_MODE

CONFIG_FILE_ENV = "INSTANTIATOR_CONFIG"


class InstantiatorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INSTANTIATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Global defaults
    default_mode: str = Field(default=DEFAULT_MODE, min_length=1)
    default_fallback: bool = True

    # Registration
    strict_registration: bool = False

    # Logger
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # YAML sits below the environment so deployments can override a checked-in file
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def load_settings(config_file: Optional[str] = None, **overrides) -> InstantiatorSettings:
    """
    Load settings from the environment, `.env` and an optional YAML file.

    The YAML path comes from `config_file` or the INSTANTIATOR_CONFIG variable;
    a path that does not exist is ignored.
    """
    config_file = config_file or os.getenv(CONFIG_FILE_ENV)
    if not config_file:
        return InstantiatorSettings(**overrides)

    class FileSettings(InstantiatorSettings):
        model_config = SettingsConfigDict(yaml_file=config_file)

    return FileSettings(**overrides)
