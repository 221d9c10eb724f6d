from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

AlertKind = Literal["critical", "warning", "info"]


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    label: str
    message: str
    occurred_at: datetime
    icon: str = ""


class AlertListResponse(BaseModel):
    items: list[Alert]
    count: int
    active: bool
