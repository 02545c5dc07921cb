"""Data models for tag records returned by the Wireless Sensor Tag service."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .const import TAG_TYPE_MODELS, UNKNOWN_MODEL

HUMIDITY_FIELD = "cap"


class RemoteTagRecord(BaseModel):
    """Snapshot of one physical tag as reported by ``GetTagList2``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    persistent_id: str = Field(alias="uuid", min_length=1)
    name: str = ""
    temperature: float
    cap: float | None = Field(
        default=None, description="Humidity capacitance reading, when supported"
    )
    battery_remaining: float = Field(alias="batteryRemaining")
    alive: bool = True
    out_of_range: bool = Field(default=True, alias="OutOfRange")
    rev: int | str | None = Field(default=None, description="Firmware revision")
    slave_id: int = Field(alias="slaveId")
    tag_type: int = Field(default=0, alias="tagType")
    has_humidity: bool = False

    @model_validator(mode="before")
    @classmethod
    def _detect_humidity(cls, data: Any) -> Any:
        """Record humidity support from the presence of the ``cap`` field.

        A tag reporting ``cap: 0`` supports humidity; a tag omitting the
        field (or sending ``null``) does not.
        """

        if isinstance(data, Mapping):
            data = dict(data)
            data["has_humidity"] = data.get(HUMIDITY_FIELD) is not None
        return data

    @property
    def firmware_revision(self) -> str:
        """Return the firmware revision as a string."""

        if self.rev is None:
            return ""
        return str(self.rev)

    @property
    def occupied(self) -> bool:
        """Return True when the tag is alive and within range."""

        return self.alive and not self.out_of_range

    @property
    def model_name(self) -> str:
        """Return the friendly model name for the tag type."""

        return model_name_for(self.tag_type)


class TagListResponse(BaseModel):
    """Envelope returned by the ASMX tag list endpoint."""

    model_config = ConfigDict(extra="ignore")

    d: list[Any]


def model_name_for(tag_type: int | None) -> str:
    """Return the model name for ``tag_type`` or ``"Unknown"``."""

    if tag_type is None:
        return UNKNOWN_MODEL
    return TAG_TYPE_MODELS.get(tag_type, UNKNOWN_MODEL)
