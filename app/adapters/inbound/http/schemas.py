"""HTTP adapter schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned for every pipeline failure."""

    detail: str
    kind: str
    field_errors: dict[str, str] = Field(default_factory=dict, alias="fieldErrors")
    upstream_status: Optional[int] = Field(default=None, alias="upstreamStatus")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "detail": "Validation failed",
                "kind": "validation_failed",
                "fieldErrors": {"postal_code": "Please enter a valid Canadian postal code (e.g., A1A 1A1)"},
            }
        },
    )


class SessionResponse(BaseModel):
    """Identity of the caller as resolved from the bearer token."""

    user_id: Optional[str] = Field(default=None, alias="userId")
    display_name: str = Field(default="", alias="displayName")
    role: Optional[str] = None
    authenticated: bool = False

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "userId": "u-manager",
                "displayName": "Sam Carter",
                "role": "SALES_MANAGER",
                "authenticated": True,
            }
        },
    )
