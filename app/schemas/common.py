"""
ERP Common Schemas
Shared Pydantic models for common API structures
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model for the JSON API.

    Fields are snake_case in Python and camelCase on the wire; requests may use
    either spelling.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Response for operations that return no resource"""
    message: str = Field(..., description="Human-readable result")


class ErrorResponse(CamelModel):
    """Standard error body produced by the exception handlers"""
    detail: str = Field(..., description="Human-readable error message")


class HealthResponse(CamelModel):
    status: str
    version: str
    database: str
    debug: bool
