"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation requests.

    ``name`` must not be blank; ``email`` is normalised to lower case.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    email: EmailStr
    phone: str = ""
    address: str = ""
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Customer name is required.")
        return v

    @field_validator("email")
    @classmethod
    def lower_case_email(cls, v: str) -> str:
        return v.lower()


class UpdateCustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    All fields are optional; only supplied fields are updated.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def lower_case_email(cls, v: str | None) -> str | None:
        return v.lower() if v is not None else v
