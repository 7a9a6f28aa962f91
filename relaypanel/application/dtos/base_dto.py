# relaypanel/application/dtos/base_dto.py

"""
Base class for custom DTOs.

DTOs are exchanged with the HTTP layer in camelCase while the Python
side keeps snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CustomBaseModel(BaseModel):
    """
    Base model for all application DTOs.

    Accepts both camelCase aliases and field names on input and
    serializes with aliases by default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        serialize_by_alias=True,
    )
