from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire format is camelCase; Python code uses snake_case."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class MessageResponse(CamelModel):
    success: bool = True
    message: str
