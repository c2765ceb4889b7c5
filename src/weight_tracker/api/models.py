"""Pydantic models for API request payloads."""

from pydantic import BaseModel, Field


class EditSessionRequest(BaseModel):
    """Request to start editing a record."""

    date: str = Field(min_length=1)


class ViewportRequest(BaseModel):
    """Chart viewport state reported by the client."""

    width: float = Field(gt=0, allow_inf_nan=False)
    visible: bool = True
