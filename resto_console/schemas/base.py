"""
Shared base for wire schemas: snake_case in Python, camelCase on the wire
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class MessageResponse(CamelModel):
    success: bool = True
    message: str
