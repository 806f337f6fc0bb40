"""
SimHub Backend — Shared Pydantic Schemas
========================================

What:  Response shapes shared by every route: field-level validation errors,
       the standard error envelope, and the health check payload.
Why:   Clients parse one error format regardless of which endpoint failed.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

InputSource = Literal["body", "query", "params"]


class CamelModel(BaseModel):
    """
    Base for every API schema: snake_case in Python, camelCase on the wire.

    populate_by_name: services can build models from entity attributes
    (snake_case) while clients send and receive camelCase JSON.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldError(BaseModel):
    """
    One violated constraint from validate_input().

    Example:
        {"field": "pagination.perPage", "message": "Input should be greater than 0", "source": "query"}
    """
    field: str = Field(description="Dot-joined path to the offending value")
    message: str = Field(description="Why the value was rejected")
    source: InputSource = Field(description="Where the value came from: body, query or params")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    details is a list of FieldError for input validation failures and a dict
    of context for everything else.
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Union[List[FieldError], dict]] = Field(default=None)
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class PaginationMetaOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    total: int = Field(ge=0)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    last_page: int = Field(ge=0)


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected, not_used")
    storage_backend: str = Field(description="Repository adapters in use: database or memory")
    uptime_seconds: float = Field(description="Seconds since service started")
