"""Common schemas used across the application."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON with the kiosk and monitor clients.

    snake_case field names are still accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Message(CamelModel):
    """Simple message response."""

    message: str


class SuccessResponse(CamelModel):
    success: bool = True
