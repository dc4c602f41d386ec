"""Pydantic schemas for admin employee management."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import check_password_length
from app.db.enums import DocumentType


class EmployeeDocumentUrls(BaseModel):
    """Optional document URLs attached while creating/updating an employee."""
    cnic_front_url: str | None = Field(None, max_length=500)
    cnic_back_url: str | None = Field(None, max_length=500)
    offer_letter_url: str | None = Field(None, max_length=500)


class EmployeeCreate(EmployeeDocumentUrls):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    employee_id: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=6, max_length=128)
    department: str = Field(..., min_length=1, max_length=255)
    position: str = Field(..., min_length=1, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_length(value)


class EmployeeUpdate(EmployeeDocumentUrls):
    id: UUID
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    employee_id: str | None = Field(None, min_length=1, max_length=64)
    password: str | None = Field(None, min_length=6, max_length=128)
    department: str | None = Field(None, max_length=255)
    position: str | None = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str | None) -> str | None:
        return check_password_length(value)


class EmployeeDocumentRead(BaseModel):
    id: UUID
    user_id: UUID
    document_type: DocumentType
    title: str
    document_url: str
    uploaded_by: UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
