from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class InspectionStatus(str, Enum):
    GOOD = "G"
    FAIR = "F"
    POOR = "P"


_STATUS_WORDS = {
    "good": InspectionStatus.GOOD,
    "fair": InspectionStatus.FAIR,
    "poor": InspectionStatus.POOR,
}


class _RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CustomerInfo(_RecordModel):
    location: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    car_brand: Optional[str] = None
    car_model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None


class InspectionPhoto(_RecordModel):
    name: str = "photo"
    data_url: Optional[str] = None


class ChecklistEntry(_RecordModel):
    status: InspectionStatus = InspectionStatus.GOOD
    notes: str = ""
    photo: Optional[InspectionPhoto] = Field(default=None, validation_alias=AliasChoices("file", "photo"))

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            cleaned = value.strip()
            return _STATUS_WORDS.get(cleaned.lower(), cleaned.upper())
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_default(cls, value: Any) -> Any:
        return "" if value is None else value


class InspectionRecord(_RecordModel):
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    inspection: Dict[str, ChecklistEntry] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("inspection", "inspectionItems", "inspection_items"),
    )
    agreed: bool = False
    signature: Optional[str] = None

    @field_validator("signature", mode="before")
    @classmethod
    def _blank_signature_is_unsigned(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ConfigMetadata(BaseModel):
    defaults: Dict[str, Any]
    statuses: Dict[str, str]
    checklist_groups: Dict[str, List[str]]
    terms: List[str]
    notes: Dict[str, str]
