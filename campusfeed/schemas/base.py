from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response models serialize with camelCase keys, matching the wire format."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
