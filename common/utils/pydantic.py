from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel as _PydanticBaseModel,
    ConfigDict,
)
from typing_extensions import Self

from .cached import cached_property


class BaseModel(_PydanticBaseModel):
    model_config = ConfigDict(
        extra="forbid",
        strict=True,
        frozen=True,
        populate_by_name=True,
        ignored_types=(cached_property,),
    )

    @classmethod
    def from_json(cls, json_data: str) -> Self:
        return cls.model_validate_json(json_data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> Self:
        """The object is not mutable, so there is no point in creating a copy."""
        memo[id(self)] = self
        return self


class ResponseModel(BaseModel):
    """Remote responses can have fields which the client doesn't know about."""

    model_config = ConfigDict(
        extra="allow",
        strict=False,
        frozen=True,
        populate_by_name=True,
        ignored_types=(cached_property,),
    )
