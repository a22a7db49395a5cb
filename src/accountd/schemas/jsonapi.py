"""JSON:API document shapes shared by all resources.

Learn: JSON:API wraps every resource as {"type", "id", "attributes"}
inside a top-level "data" member, and every error as an object inside a
top-level "errors" array. Resource-specific schemas subclass these.
"""

from typing import Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JsonApiResponse(JSONResponse):
    """JSON response served with the JSON:API media type."""

    media_type = JSONAPI_MEDIA_TYPE


class ErrorSource(BaseModel):
    pointer: Optional[str] = None
    parameter: Optional[str] = None


class ErrorObject(BaseModel):
    status: str
    title: str
    detail: Optional[str] = None
    source: Optional[ErrorSource] = None


class ErrorDocument(BaseModel):
    errors: list[ErrorObject] = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Plain confirmation body used by mutations."""

    message: str
