"""Shared response shapes."""

from uuid import UUID

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool = True


class IdRequest(BaseModel):
    """Body for mutations that only take a target id."""
    id: UUID
