"""Shared schema base — camelCase aliases and ORM attribute loading."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from relations_api.core.domain_types import MAX_ENTITY_ID

EntityIdField = Annotated[int, Field(ge=1, le=MAX_ENTITY_ID)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str
