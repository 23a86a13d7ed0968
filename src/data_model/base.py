"""Shared Pydantic base models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StrictBaseModel(BaseModel):
    """Base model with strict, immutable defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class WireModel(BaseModel):
    """Immutable model serialized to clients with camelCase keys.

    Fields are declared in snake_case and may be populated by either name.
    Use ``model_dump(by_alias=True, mode="json")`` for the wire form.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )
