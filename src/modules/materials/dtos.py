"""Material company DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from modules.materials.models import DEFAULT_TAX_RATE


class CreateMaterialCompanyDTO(BaseModel):
    """Immutable DTO for adding a supplier.

    ``name`` must not be blank.  A blank ``email`` means "no e-mail".
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(max_length=150)
    contact_person: str = ""
    phone: str = ""
    email: Optional[EmailStr] = None
    address: str = ""
    website: str = ""
    tax_rate: Decimal = Field(default=DEFAULT_TAX_RATE, ge=0, le=100, decimal_places=2)
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Company name is required.")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UpdateMaterialCompanyDTO(BaseModel):
    """Immutable DTO for supplier updates; only supplied fields change.

    ``email=""`` clears the stored address.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Union[EmailStr, Literal[""]]] = None
    address: Optional[str] = None
    website: Optional[str] = None
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    notes: Optional[str] = None
