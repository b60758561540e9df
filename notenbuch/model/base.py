import typing as t

import pydantic as p


class BaseModel(p.BaseModel):
    # records are stored under their aliases but built in code by field name
    model_config = p.ConfigDict(populate_by_name=True)

    def model_dump(self, *, by_alias: bool | None = True, **kwargs: t.Any) -> dict[str, t.Any]:
        # dump by alias unless asked otherwise
        return super().model_dump(by_alias=by_alias, **kwargs)

    def to_record(self) -> dict[str, t.Any]:
        """JSON-compatible dump suitable for the key-value store.

        The store cannot hold nulls, so absent optionals are left out.
        """
        return self.model_dump(mode="json", exclude_none=True)
