import typing as t

from pydantic_settings import BaseSettings as PydanticBaseSettings

from notenbuch.model import BaseModel


# NOTE: BaseModel comes second so its by-alias model_dump is inherited
class BaseSettings(PydanticBaseSettings, BaseModel):  # pyright: ignore [reportIncompatibleVariableOverride]
    def __init__(self, cf: dict[str, t.Any] | None = None, **kwargs: t.Any):
        # sub-settings arrive from the container as plain dicts
        if cf is not None:
            kwargs = {**cf, **kwargs}
        super().__init__(**kwargs)
