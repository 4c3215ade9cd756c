"""Pydantic model for stored webhook calls."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class WebhookCallModel(BaseModel):
    model_config = ConfigDict(extra="forbid", from_attributes=True)

    id: str
    name: str
    url: str
    headers: dict[str, str]
    payload: Any = None
    exception: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime
