# prescweb/schemas/pad_design.py
from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from prescweb.schemas.common import CamelModel
from prescweb.schemas.template import NameStr


class PadDesignCreate(CamelModel):
    name: NameStr
    design_data: dict[str, Any] = Field(default_factory=dict)


class PadDesignResponse(CamelModel):
    id: int
    name: str
    design_data: dict[str, Any]
    doctor_id: int | None = None
    created_at: datetime


class PadDesignCreated(CamelModel):
    message: str
    id: int
