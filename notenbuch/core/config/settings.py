import pydantic as p
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import PydanticBaseSettingsSource

from notenbuch.model import DeploymentEnvironment

from .base import BaseSettings
from .logging import LoggingSettings
from .roster import RosterSettings
from .source import OverrideSettingsSource, YAMLCascadingSettingsSource
from .storage import StorageSettings

SettingsField = p.Field(default=..., validate_default=True)


class Settings(BaseSettings):
    root: p.FileUrl
    env: DeploymentEnvironment
    override: tuple[str, ...] = ()

    logging: LoggingSettings = SettingsField
    storage: StorageSettings = StorageSettings()
    roster: RosterSettings = RosterSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[PydanticBaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:  # noqa: E501
        # earlier sources win: command line overrides beat the YAML files
        return init_settings, OverrideSettingsSource(settings_cls), YAMLCascadingSettingsSource(settings_cls)
