"""Subagent model."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

SubagentStatus = Literal["pending", "running", "completed", "failed"]


class Subagent(BaseModel):
    id: str
    name: str = "Subagent"
    description: str = ""
    status: SubagentStatus = "pending"
    started_at: datetime | None = None
    completed_at: datetime | None = None
