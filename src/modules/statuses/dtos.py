"""Status catalog DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateStatusDTO`` / ``UpdateStatusDTO``: admin input.
- ``StatusDefinitionDTO``: read-only catalog entry handed to the
  transition engine.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.statuses.constants import DEFAULT_COLOR, EndStateType

if TYPE_CHECKING:
    from modules.statuses.models import StatusDefinition

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def status_value_from_label(label: str) -> str:
    """Derive a machine key: ``"Waiting Fabric!"`` -> ``"waiting_fabric"``."""
    value = re.sub(r"\s+", "_", label.strip().lower())
    return re.sub(r"[^a-z0-9_]", "", value)


def _check_color(v: Optional[str]) -> Optional[str]:
    if v is not None and not HEX_COLOR.match(v):
        raise ValueError("Color must be a hex code such as #2196f3.")
    return v


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateStatusDTO(BaseModel):
    """Immutable DTO for status creation.

    ``value`` defaults to a slug of ``label``; ``sort_order`` defaults to
    the end of the catalog (resolved by the service).
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    label: str = Field(min_length=1, max_length=100)
    value: str = ""
    color: str = DEFAULT_COLOR
    description: str = ""
    is_end_state: bool = False
    end_state_type: EndStateType = EndStateType.NONE
    is_default: bool = False
    sort_order: Optional[int] = Field(default=None, ge=1)

    @field_validator("color")
    @classmethod
    def color_must_be_hex(cls, v: str) -> str:
        return _check_color(v)

    @field_validator("value")
    @classmethod
    def normalise_value(cls, v: str) -> str:
        value = status_value_from_label(v)
        if not value:
            raise ValueError("Status value must contain letters or digits.")
        return value

    @model_validator(mode="before")
    @classmethod
    def derive_defaults(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if not data.get("value"):
                data["value"] = data.get("label") or ""
            if not data.get("is_end_state"):
                data["end_state_type"] = EndStateType.NONE
        return data


class UpdateStatusDTO(BaseModel):
    """Immutable DTO for status updates; only supplied fields change."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    label: Optional[str] = Field(default=None, min_length=1, max_length=100)
    value: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    is_end_state: Optional[bool] = None
    end_state_type: Optional[EndStateType] = None
    is_default: Optional[bool] = None
    sort_order: Optional[int] = Field(default=None, ge=1)

    @field_validator("color")
    @classmethod
    def color_must_be_hex(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v)

    @field_validator("value")
    @classmethod
    def normalise_value(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        value = status_value_from_label(v)
        if not value:
            raise ValueError("Status value must contain letters or digits.")
        return value


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class StatusDefinitionDTO(BaseModel):
    """Immutable catalog entry as seen by the transition engine."""

    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    label: str
    value: str
    color: str = DEFAULT_COLOR
    description: str = ""
    is_end_state: bool = False
    end_state_type: EndStateType = EndStateType.NONE
    is_default: bool = False
    sort_order: int = 0

    @model_validator(mode="before")
    @classmethod
    def clear_type_of_regular_status(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("is_end_state"):
            data = {**data, "end_state_type": EndStateType.NONE}
        return data

    @classmethod
    def from_entity(cls, status: StatusDefinition) -> StatusDefinitionDTO:
        return cls(
            id=status.id,
            label=status.label,
            value=status.value,
            color=status.color,
            description=status.description,
            is_end_state=status.is_end_state,
            end_state_type=status.end_state_type,
            is_default=status.is_default,
            sort_order=status.sort_order,
        )
